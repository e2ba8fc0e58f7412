# src/taskdeck/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The store depends on Protocols instead of concrete implementations.
This keeps the persistence backend and the UI host swappable and makes testing easier.
"""

from collections.abc import Callable, Mapping, Sequence
from datetime import datetime
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from ..tasks.task_gateway import StoreState

Clock = Callable[[], datetime]
# Returns the current time as a timezone-aware datetime.

Confirm = Callable[[str], bool]
# UI-side confirmation prompt for destructive operations.


class TaskGateway(Protocol):
    """Whole-document persistence for the task store."""

    def load(self) -> StoreState: ...

    def save(self, data: StoreState | Mapping[str, Any] | Sequence[Any]) -> bool: ...
