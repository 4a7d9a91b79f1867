"""Form validation helpers."""
