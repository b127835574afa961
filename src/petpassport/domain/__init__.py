"""Domain layer — the passport record, its operations, and collaborator ports.

This layer depends only on stdlib and pydantic.
It must never import from services, infrastructure, commands, or config.
"""
