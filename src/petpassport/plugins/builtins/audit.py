"""Built-in audit plugin — writes every lifecycle event to the structured log."""

from __future__ import annotations

import pluggy
import structlog

hookimpl = pluggy.HookimplMarker("petpassport")


class AuditPlugin:
    """Logs passport events at INFO on the ``petpassport.audit`` logger."""

    def __init__(self, registry_name: str = "rescue-registry") -> None:
        self._log = structlog.get_logger("petpassport.audit").bind(registry=registry_name)

    @hookimpl
    def post_issue(
        self,
        passport_id: str,
        animal_name: str,
        animal_type: str,
        issued_by: str,
        rescue_date: int,
    ) -> None:
        self._log.info(
            "passport.issued",
            passport_id=passport_id,
            animal_name=animal_name,
            animal_type=animal_type,
            issued_by=issued_by,
            rescue_date=rescue_date,
        )

    @hookimpl
    def post_transfer(self, passport_id: str, sender: str, recipient: str) -> None:
        self._log.info(
            "passport.transferred",
            passport_id=passport_id,
            sender=sender,
            recipient=recipient,
        )

    @hookimpl
    def post_rename(
        self,
        passport_id: str,
        old_name: str,
        new_name: str,
        updated_by: str,
    ) -> None:
        self._log.info(
            "passport.renamed",
            passport_id=passport_id,
            old_name=old_name,
            new_name=new_name,
            updated_by=updated_by,
        )
