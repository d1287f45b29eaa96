"""Intern registry: CRUD service for intern records."""
