"""Repository interfaces anchoring the domain layer."""
from __future__ import annotations

from typing import Protocol, Sequence

from .models import PositionSnapshot


class PositionRepository(Protocol):
    """Provides open positions as reported by the upstream trading backend."""

    def list_positions(self) -> Sequence[PositionSnapshot]:
        ...
