"""Transport interface.

This is the (small) contract a transport implementation has to follow to
carry packnet traffic: deliver every inbound ``(channel, text)`` pair to a
single registered handler, and send ``(channel, text)`` pairs out. Nothing
here knows about packets, the ceiling on message length is the caller's
problem.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Callable, Optional


# Transport agnostic exceptions

class TransportError(Exception):
    """Base class for all transport-layer errors."""


class TransportClosed(TransportError):
    """The transport was used after it was closed."""


class TransportPortError(TransportError):
    """No suitable port could be bound or connected."""


Handler = Callable[[str, str], None]


class Transport(ABC):
    """Minimal contract for a channel-tagged text transport."""

    def __init__(self) -> None:
        self.handler: Optional[Handler] = None
        self.closed = False

    def listen(self, handler: Optional[Handler]) -> None:
        """Register the handler invoked for every inbound message.

        Only one handler is kept; registering another replaces it, and
        None detaches the current one.
        """

        if handler is not None and not callable(handler):
            raise TypeError("handler must be callable")
        self.handler = handler

    def deliver(self, channel: str, text: str) -> None:
        """Hand one inbound message to the registered handler, if any."""

        handler = self.handler
        if handler is None:
            return
        handler(channel, text)

    @abstractmethod
    def send(self, channel: str, text: str) -> None:
        """Send one message. No delivery guarantee is made."""

    def close(self) -> None:
        """Stop delivering and sending messages."""

        self.handler = None
        self.closed = True

    @property
    def is_open(self) -> bool:
        """Whether the transport can still send."""
        return not self.closed
