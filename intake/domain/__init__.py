"""Domain records (submissions, courses) and their JSON encoding."""
