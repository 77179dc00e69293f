"""
Abstract base class for detection channels in ModSentinel.

Defines the AlertChannel interface that all channel implementations
must follow, ensuring consistent delivery semantics and error handling.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from ms_common.models import DisallowedDetectedEvent


class AlertChannel(ABC):
    """Base class every detection delivery channel must implement.

    Subclasses override :meth:`send` to deliver an event to their
    specific transport (structured log, HTTP webhook, etc.).

    Attributes:
        name: Human-readable channel name used in logs and delivery tracking.
        enabled: Runtime flag; ``False`` disables delivery without removing
                 the channel from the dispatcher's registry.
    """

    name: str = "base"
    enabled: bool = True

    @abstractmethod
    async def send(self, event: DisallowedDetectedEvent) -> bool:
        """Deliver *event* to the channel's backend.

        Args:
            event: Fully-populated detection event.

        Returns:
            ``True`` if delivery succeeded, ``False`` otherwise.
        """

    async def close(self) -> None:
        """Release any resources held by the channel (override if needed)."""
