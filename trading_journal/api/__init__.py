"""HTTP gateway exposing the journal views as a FastAPI application."""
