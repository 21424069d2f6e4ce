"""
Explain trail of one pricing call.

The discount, coupon and rounding steps append entries; rendering turns them
into the plain strings carried by PriceInfo.breakdown.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Iterator, List, Tuple


class BreakdownKind(str, Enum):
    STEP = "STEP"
    WARNING = "WARNING"
    META = "META"


# Rendered prefix per kind; steps print bare
_PREFIX = {
    BreakdownKind.STEP: "",
    BreakdownKind.WARNING: "WARNING: ",
    BreakdownKind.META: "META: ",
}

_CODE = re.compile(r"^[A-Z][A-Z0-9_]{2,63}$")  # LINE, TIER_DISCOUNT, COUPON, ROUNDING
_MAX_MESSAGE = 240


def _checked(code: str, message: str) -> Tuple[str, str]:
    if not isinstance(code, str) or not isinstance(message, str):
        raise TypeError("breakdown code and message must be str")
    code, message = code.strip(), message.strip()
    if not _CODE.match(code):
        raise ValueError(f"breakdown code {code!r} is not UPPER_SNAKE of 3-64 chars")
    if not message:
        raise ValueError(f"{code}: empty breakdown message")
    if any(ch in message for ch in "\r\n\t"):
        raise ValueError(f"{code}: breakdown message must be a single line")
    if len(message) > _MAX_MESSAGE:
        raise ValueError(f"{code}: breakdown message exceeds {_MAX_MESSAGE} chars")
    return code, message


@dataclass(frozen=True)
class BreakdownEntry:
    seq: int
    kind: BreakdownKind
    code: str
    message: str

    def render(self) -> str:
        return _PREFIX[self.kind] + self.message


class Breakdown:
    """Append-only; iterating yields the rendered strings."""

    def __init__(self) -> None:
        self._entries: List[BreakdownEntry] = []

    @property
    def entries(self) -> List[BreakdownEntry]:
        return list(self._entries)

    def codes(self) -> List[str]:
        return [e.code for e in self._entries]

    def add(self, kind: BreakdownKind, code: str, message: str) -> BreakdownEntry:
        code, message = _checked(code, message)
        entry = BreakdownEntry(len(self._entries) + 1, BreakdownKind(kind), code, message)
        self._entries.append(entry)
        return entry

    def add_step(self, code: str, message: str) -> BreakdownEntry:
        return self.add(BreakdownKind.STEP, code, message)

    def add_warning(self, code: str, message: str) -> BreakdownEntry:
        return self.add(BreakdownKind.WARNING, code, message)

    def add_meta(self, code: str, message: str) -> BreakdownEntry:
        return self.add(BreakdownKind.META, code, message)

    def as_strings(self) -> List[str]:
        return BreakdownBuilder().build(self)

    def __iter__(self) -> Iterator[str]:
        return iter(self.as_strings())

    def __len__(self) -> int:
        return len(self._entries)


class BreakdownBuilder:
    """Renders a Breakdown to list[str] in the order entries were added."""

    def build(self, breakdown: Breakdown) -> List[str]:
        if not isinstance(breakdown, Breakdown):
            raise TypeError("BreakdownBuilder.build expects a Breakdown instance")
        return [e.render() for e in breakdown.entries]
