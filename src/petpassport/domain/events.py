"""Event records emitted by passport operations.

Each event maps 1:1 onto a pluggy hook (``hook_name``) whose keyword
arguments are the event fields. Events are immutable once built.
"""

from __future__ import annotations

from typing import Any, ClassVar

from pydantic import BaseModel


class PassportEvent(BaseModel):
    """Base for all passport lifecycle events."""

    model_config = {"frozen": True}

    hook_name: ClassVar[str]

    passport_id: str

    def payload(self) -> dict[str, Any]:
        """Keyword arguments for the matching hook."""
        return self.model_dump()


class PassportIssued(PassportEvent):
    """A passport was constructed."""

    hook_name = "post_issue"

    animal_name: str
    animal_type: str
    issued_by: str
    rescue_date: int


class PassportTransferred(PassportEvent):
    """A passport changed holder."""

    hook_name = "post_transfer"

    sender: str
    recipient: str


class AnimalNameUpdated(PassportEvent):
    """The issuer renamed the animal."""

    hook_name = "post_rename"

    old_name: str
    new_name: str
    updated_by: str

