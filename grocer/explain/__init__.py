from __future__ import annotations

from .breakdown_builder import Breakdown, BreakdownBuilder, BreakdownEntry, BreakdownKind

__all__ = [
    "Breakdown",
    "BreakdownBuilder",
    "BreakdownEntry",
    "BreakdownKind",
]
