"""Row-store collaborator."""

from __future__ import annotations

from .base import Filters, Row, RowStore
from .postgrest import PostgrestStore

__all__ = ["Filters", "PostgrestStore", "Row", "RowStore"]
