"""Typed results for the fan-out pipeline.

Each peer call reduces to a tagged PeerResult; the request-level
GreetingResult keeps only successful contributions, in slot order.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Literal

SEPARATOR = ", "


@dataclass(frozen=True)
class PeerResult:
    """Outcome of a single peer call."""

    status: Literal["success", "failed"]
    slot: str
    response: str | None = None
    error: str | None = None

    @classmethod
    def success(cls, slot: str, response: str) -> PeerResult:
        return cls(status="success", slot=slot, response=response)

    @classmethod
    def failure(cls, slot: str, error: str) -> PeerResult:
        return cls(status="failed", slot=slot, error=error)

    @property
    def ok(self) -> bool:
        return self.status == "success"


@dataclass
class GreetingResult:
    """Ordered greetings for one incoming request."""

    parts: list[str] = field(default_factory=list)

    @classmethod
    def from_outcomes(
        cls, local: str, outcomes: Iterable[PeerResult | None]
    ) -> GreetingResult:
        """Build a result from the local greeting and per-slot outcomes.

        Absent slots (``None``) and failed calls are dropped without
        leaving a placeholder.
        """
        result = cls([local])
        for outcome in outcomes:
            if outcome is not None and outcome.ok and outcome.response is not None:
                result.parts.append(outcome.response)
        return result

    def join(self) -> str:
        return SEPARATOR.join(self.parts)
