"""Infrastructure layer — SQLite registry backing the passport ports.

This layer depends on stdlib and third-party libs (SQLAlchemy).
It may import domain models but never services, commands, or output.
"""
