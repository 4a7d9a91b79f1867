"""Filter and pagination state for the list views."""
