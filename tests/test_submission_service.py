from __future__ import annotations

import json
from concurrent.futures import ThreadPoolExecutor
from itertools import count

import pytest

from intake.repositories import build_repository
from intake.services.errors import NotFoundError, ValidationError
from intake.services.submission_service import SubmissionService


def _clock():
    seq = count(1)
    return lambda: f"2026-01-01T10:00:{next(seq):02d}.000Z"


@pytest.fixture()
def service(any_env):
    return SubmissionService(build_repository(any_env), clock=_clock())


@pytest.mark.parametrize("field", ["parentName", "parentEmail", "parentPhone", "studentName", "studentDob"])
def test_submit_rejects_blank_required_field(service, valid_payload, field):
    valid_payload[field] = "   "
    with pytest.raises(ValidationError):
        service.submit(valid_payload)
    assert service.repository.load() == []


def test_submit_rejects_empty_subjects(service, valid_payload):
    valid_payload["subjects"] = []
    with pytest.raises(ValidationError):
        service.submit(valid_payload)
    assert service.repository.load() == []


def test_submit_rejects_non_object(service):
    with pytest.raises(ValidationError) as exc:
        service.submit(["not", "an", "object"])
    assert exc.value.message == "Invalid submission payload"


def test_submit_creates_single_active_record(service, valid_payload):
    valid_payload["id"] = "client-chosen"
    created = service.submit(valid_payload)

    stored = service.repository.load()
    assert len(stored) == 1
    record = stored[0]
    assert record.id == created.id
    assert record.id != "client-chosen"
    assert record.subjects == ["Maths"]
    assert record.is_trashed is False
    assert record.trashed_at is None
    assert record.submitted_at


def test_ids_are_unique(service, valid_payload):
    ids = {service.submit(dict(valid_payload)).id for _ in range(5)}
    assert len(ids) == 5


def test_trash_restore_and_filters(service, valid_payload):
    keep = service.submit(dict(valid_payload))
    gone = service.submit(dict(valid_payload))

    service.trash(gone.id)
    assert [s.id for s in service.list("active")] == [keep.id]
    assert [s.id for s in service.list("true")] == [gone.id]
    assert {s.id for s in service.list("all")} == {keep.id, gone.id}
    trashed = service.get(gone.id)
    assert trashed.is_trashed is True
    assert trashed.trashed_at is not None

    service.restore(gone.id)
    restored = service.get(gone.id)
    assert restored.is_trashed is False
    assert restored.trashed_at is None
    assert {s.id for s in service.list()} == {keep.id, gone.id}


def test_trash_twice_rewrites_timestamp(service, valid_payload):
    item = service.submit(valid_payload)
    first = service.trash(item.id).trashed_at
    second = service.trash(item.id).trashed_at
    assert first != second
    assert service.get(item.id).is_trashed is True


def test_purge_removes_record(service, valid_payload):
    item = service.submit(valid_payload)
    service.purge(item.id)
    with pytest.raises(NotFoundError):
        service.get(item.id)
    with pytest.raises(NotFoundError):
        service.purge(item.id)


@pytest.mark.parametrize("op", ["get", "trash", "restore", "purge"])
def test_missing_id_is_not_found(service, op):
    with pytest.raises(NotFoundError):
        getattr(service, op)("nope")


def test_list_orders_newest_first(service, valid_payload):
    first = service.submit(dict(valid_payload))
    second = service.submit(dict(valid_payload))
    third = service.submit(dict(valid_payload))
    assert [s.id for s in service.list()] == [third.id, second.id, first.id]


def test_list_filters_by_type(service, valid_payload):
    charity = service.submit({**valid_payload, "isCharity": True})
    standard = service.submit({**valid_payload, "isCharity": False})
    assert [s.id for s in service.list(kind="charity")] == [charity.id]
    assert [s.id for s in service.list(kind="standard")] == [standard.id]
    assert len(service.list(kind="whatever")) == 2


def test_unparsable_timestamps_sort_last(json_env):
    data_dir = json_env.data_dir
    data_dir.mkdir(parents=True, exist_ok=True)
    rows = [
        {"id": "bad", "parentName": "A", "subjects": ["Maths"], "submittedAt": "not a date"},
        {"id": "old", "parentName": "B", "subjects": ["Maths"], "submittedAt": "2025-01-01T00:00:00.000Z"},
        {"id": "legacy", "parentName": "C", "subjects": "Maths,English", "createdAt": "2025-06-01T00:00:00Z"},
        {"id": "none", "parentName": "D", "subjects": ["Maths"]},
    ]
    (data_dir / "submissions.json").write_text(json.dumps(rows), encoding="utf-8")
    svc = SubmissionService(build_repository(json_env))

    ordered = [s.id for s in svc.list()]
    assert ordered[:2] == ["legacy", "old"]
    assert set(ordered[2:]) == {"bad", "none"}
    assert svc.get("legacy").subjects == ["Maths", "English"]


def test_legacy_archived_flag_counts_as_trashed(json_env):
    data_dir = json_env.data_dir
    data_dir.mkdir(parents=True, exist_ok=True)
    rows = [{"id": "x", "subjects": ["Maths"], "isArchived": True, "archivedAt": "2025-01-01T00:00:00Z"}]
    (data_dir / "submissions.json").write_text(json.dumps(rows), encoding="utf-8")
    svc = SubmissionService(build_repository(json_env))
    assert svc.list() == []
    assert svc.list("true")[0].trashed_at == "2025-01-01T00:00:00Z"


def test_each_write_takes_a_backup(json_env, valid_payload):
    repo = build_repository(json_env)
    svc = SubmissionService(repo, clock=_clock())
    item = svc.submit(valid_payload)
    svc.trash(item.id)
    assert len(repo.backups.list_backups()) == 2


def test_legacy_archived_without_timestamp_keeps_trashed_at(json_env):
    data_dir = json_env.data_dir
    data_dir.mkdir(parents=True, exist_ok=True)
    rows = [
        {"id": "dated", "subjects": ["Maths"], "isArchived": True, "createdAt": "2025-02-01T00:00:00Z"},
        {"id": "undated", "subjects": ["Maths"], "isArchived": 1},
    ]
    (data_dir / "submissions.json").write_text(json.dumps(rows), encoding="utf-8")
    svc = SubmissionService(build_repository(json_env))

    assert svc.get("dated").trashed_at == "2025-02-01T00:00:00Z"
    assert svc.get("undated").is_trashed is True
    assert svc.get("undated").trashed_at


def test_concurrent_submits_and_trashes_lose_nothing(any_env, valid_payload):
    svc = SubmissionService(build_repository(any_env))

    def submit_then_maybe_trash(i):
        item = svc.submit({**valid_payload, "parentName": f"Parent {i}"})
        if i % 3 == 0:
            svc.trash(item.id)
        return item.id

    with ThreadPoolExecutor(max_workers=8) as pool:
        ids = list(pool.map(submit_then_maybe_trash, range(48)))

    stored = svc.repository.load()
    assert len(ids) == len(set(ids)) == 48
    assert {s.id for s in stored} == set(ids)
    assert len(svc.list("true")) == 16
    assert all(s.trashed_at for s in svc.list("true"))
    assert len(svc.repository.backups.list_backups()) == 30
