"""
snowflake_sdk.tier0_core.ids
─────────────────────────────
Shared id vocabulary: the collaborator interface every 64-bit id source
implements, and the decoded form of a snowflake id.
"""
from __future__ import annotations

from typing import TYPE_CHECKING, NamedTuple, Protocol, runtime_checkable

if TYPE_CHECKING:
    from snowflake_sdk.tier0_core.layout import LayoutConfig


@runtime_checkable
class UIDGenerator(Protocol):
    """Anything that hands out unique 64-bit ids."""

    def get(self) -> int: ...


class IdParts(NamedTuple):
    """Fields of a decoded id. timestamp is relative to the layout epoch."""

    timestamp: int
    node_id: int
    sequence: int

    def unix_ms(self, layout: LayoutConfig) -> int:
        """Absolute creation time in milliseconds since the Unix epoch."""
        return layout.epoch + self.timestamp


__all__ = ["UIDGenerator", "IdParts"]
