"""Service layer for the mood tracker API."""
