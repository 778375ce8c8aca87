"""Finalization oracle protocol."""

from typing import Protocol, runtime_checkable


@runtime_checkable
class FinalizationOracle(Protocol):
    """Protocol for checking whether a voting round is finalized."""

    async def is_finalized(self, protocol_id: int, round_id: int) -> bool:
        """Return True once ``round_id`` is finalized for ``protocol_id``."""
        ...
