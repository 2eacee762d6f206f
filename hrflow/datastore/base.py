"""Contract for the hosted relational row store."""

from __future__ import annotations

from typing import Any, Mapping, Protocol

Row = dict[str, Any]
Filters = Mapping[str, Any]


class RowStore(Protocol):
    """Generic table access scoped to the signed-in identity.

    Implementations raise :class:`hrflow.errors.RemoteError` when the store
    rejects a call and :class:`hrflow.errors.TransportError` when it cannot
    be reached.
    """

    def select(
        self,
        table: str,
        filters: Filters | None = None,
        *,
        columns: str = "*",
        order: str | None = None,
        descending: bool = False,
    ) -> list[Row]:
        """Return rows of ``table`` matching every equality filter."""

    def insert(self, table: str, row: Mapping[str, Any]) -> list[Row]:
        """Insert ``row`` and return the stored representation."""

    def update(self, table: str, filters: Filters, patch: Mapping[str, Any]) -> list[Row]:
        """Apply ``patch`` to rows matching ``filters``."""

    def upsert(
        self,
        table: str,
        row: Mapping[str, Any],
        *,
        on_conflict: str,
        access_token: str | None = None,
    ) -> list[Row]:
        """Insert ``row`` or merge it into the row sharing ``on_conflict``.

        ``access_token`` pins the identity for this call instead of the
        current session.
        """


__all__ = ["Filters", "Row", "RowStore"]
