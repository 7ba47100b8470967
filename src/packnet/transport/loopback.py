"""In-process transport.

A :class:`LoopbackBus` plays the role of the host event system: every
message sent by any attached :class:`LoopbackTransport` is delivered to
every attached transport, the sender included. Delivery is run to
completion, one message at a time; a message sent while another is being
delivered waits its turn instead of nesting.
"""

from __future__ import annotations

import collections
import logging
import random
from typing import List, Optional, Tuple

from .base import Transport, TransportClosed

logger = logging.getLogger(__name__)


class LoopbackBus:
    """Broadcast hub shared by a set of loopback transports.

    With *autoflush* disabled, messages accumulate until :meth:`flush` is
    called. With *shuffle* enabled, each batch of queued messages is
    delivered in random order (seeded by *seed*), the way a transport with
    no ordering guarantee might. With *record* enabled, every posted
    message is also kept in :attr:`history`.

    If a handler raises, the message being delivered still reaches the
    remaining transports, anything left in the batch goes back to the
    front of the queue, and the first exception is re-raised.

    :ivar history: Every ``(channel, text)`` pair posted, in send order;
        empty unless *record* is enabled.
    """

    def __init__(self, autoflush: bool = True, shuffle: bool = False, seed: Optional[int] = None, record: bool = False):
        self.autoflush = autoflush
        self.shuffle = shuffle
        self.record = record
        self.random = random.Random(seed)

        self.transports: List[LoopbackTransport] = []
        self.queue: collections.deque = collections.deque()
        self.history: List[Tuple[str, str]] = []
        self.flushing = False

    def attach(self, transport: "LoopbackTransport") -> None:
        if transport not in self.transports:
            self.transports.append(transport)

    def detach(self, transport: "LoopbackTransport") -> None:
        try:
            self.transports.remove(transport)
        except ValueError:
            pass

    def post(self, channel: str, text: str) -> None:
        if self.record:
            self.history.append((channel, text))
        self.queue.append((channel, text))

        if self.autoflush:
            self.flush()

    def flush(self) -> int:
        """Deliver queued messages until the queue is empty.

        Returns the number of messages delivered. Calling this from inside
        a delivery does nothing; the outer flush picks up anything queued.
        """

        if self.flushing:
            return 0

        self.flushing = True
        delivered = 0

        try:
            while self.queue:
                batch = list(self.queue)
                self.queue.clear()

                if self.shuffle:
                    self.random.shuffle(batch)

                for position, (channel, text) in enumerate(batch):
                    failure = self._deliver(channel, text)
                    delivered += 1

                    if failure is not None:
                        self.queue.extendleft(reversed(batch[position + 1:]))
                        raise failure
        finally:
            self.flushing = False

        logger.debug("loopback delivered %d message(s)", delivered)
        return delivered

    def _deliver(self, channel: str, text: str) -> Optional[Exception]:
        """Hand one message to every attached transport. Returns the first
        exception raised by a handler, or None.
        """

        failure = None

        for transport in tuple(self.transports):
            try:
                transport.deliver(channel, text)
            except Exception as e:
                if failure is None:
                    failure = e
                else:
                    logger.exception("additional handler failure on %s", channel)

        return failure


class LoopbackTransport(Transport):
    """A transport attached to a :class:`LoopbackBus`.

    Without an explicit *bus* the transport gets a private one, and only
    ever hears itself.
    """

    def __init__(self, bus: Optional[LoopbackBus] = None):
        super().__init__()

        if bus is None:
            bus = LoopbackBus()

        self.bus = bus
        bus.attach(self)

    def send(self, channel: str, text: str) -> None:
        if self.closed:
            raise TransportClosed("cannot send on a closed loopback transport")
        self.bus.post(channel, text)

    def close(self) -> None:
        self.bus.detach(self)
        super().close()
