"""Persistence layer: models, store ports and their SQLite/in-memory backends."""
