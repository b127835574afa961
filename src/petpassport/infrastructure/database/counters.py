"""Atomic sequence counters for identity allocation.

One row per namespace in ``id_counters``. Values start at 1 and only
ever grow, so a sequence number is never handed out twice.

The caller owns the transaction — pass a ``Connection`` obtained from
``engine.begin()`` so the counter increment commits or rolls back with
the surrounding writes.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import insert, select, update

from petpassport.infrastructure.database.schema import id_counters

if TYPE_CHECKING:
    from sqlalchemy import Connection


def next_sequence(conn: Connection, namespace: str) -> int:
    """Claim the next sequence number for *namespace*.

    The counter row is created on first use.

    Args:
        conn: Active SQLAlchemy connection (caller owns the transaction).
        namespace: Identity namespace, usually ``settings.registry.namespace``.

    Returns:
        The claimed value (1 for the first call in a namespace).
    """
    row = conn.execute(
        select(id_counters.c.next_value).where(id_counters.c.namespace == namespace)
    ).first()

    if row is None:
        conn.execute(insert(id_counters).values(namespace=namespace, next_value=2))
        return 1

    current_value: int = row.next_value
    conn.execute(
        update(id_counters)
        .where(id_counters.c.namespace == namespace)
        .values(next_value=current_value + 1)
    )
    return current_value
