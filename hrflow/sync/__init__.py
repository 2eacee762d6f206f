"""List synchronisation helpers."""

from __future__ import annotations

from .reconciler import ListReconciler, ListState, RefreshMode

__all__ = ["ListReconciler", "ListState", "RefreshMode"]
