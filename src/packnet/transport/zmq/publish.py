"""ZeroMQ publish/subscribe transport."""

from __future__ import annotations

import logging
import threading
from typing import Optional

import zmq

from ... import config
from ..base import Transport, TransportClosed
from .framing import from_frames, to_frames

logger = logging.getLogger(__name__)


class ZmqTransport(Transport):
    """Carry packnet traffic through a :class:`packnet.transport.zmq.Broker`.

    A PUB socket connects to the broker's publisher port for sends; a SUB
    socket subscribed to everything connects to port + 1 for receives. The
    broker echoes a peer's own messages back to it, as the loopback bus
    does.

    Inbound messages are only delivered from :meth:`poll`, either called
    by the host on its own loop or by the single background thread that
    :meth:`start` launches. Sends may come from any thread.
    """

    def __init__(self, address: Optional[str] = None, port: Optional[int] = None):
        super().__init__()

        if address is None:
            address = config.zmq_address()
        if port is None:
            port = config.zmq_port()

        self.address = address
        self.port = int(port)

        context = zmq.Context.instance()

        self.pub = context.socket(zmq.PUB)
        self.pub.setsockopt(zmq.LINGER, 0)
        self.pub.connect(f"tcp://{address}:{self.port}")

        self.sub = context.socket(zmq.SUB)
        self.sub.setsockopt(zmq.LINGER, 0)
        self.sub.connect(f"tcp://{address}:{self.port + 1}")
        self.sub.setsockopt(zmq.SUBSCRIBE, b"")

        # The lock around the PUB socket is necessary in a multithreaded
        # application; otherwise, if two different threads both invoke
        # send_multipart(), the message parts can get mixed together.

        self.socket_lock = threading.Lock()

        self.shutdown = False
        self.thread: Optional[threading.Thread] = None

    def send(self, channel: str, text: str) -> None:
        if self.closed:
            raise TransportClosed("cannot send on a closed ZeroMQ transport")

        frames = to_frames(channel, text)

        with self.socket_lock:
            self.pub.send_multipart(frames)

    def poll(self, timeout: float = 0) -> int:
        """Deliver every message waiting on the SUB socket.

        Waits up to *timeout* seconds for the first message. Returns the
        number of messages delivered to the handler.
        """

        delivered = 0
        wait = int(timeout * 1000)

        while self.sub.poll(wait, zmq.POLLIN):
            wait = 0
            parts = self.sub.recv_multipart()

            message = from_frames(parts)
            if message is None:
                continue

            channel, text = message
            self.deliver(channel, text)
            delivered += 1

        return delivered

    def start(self) -> None:
        self.thread = threading.Thread(target=self.run, daemon=True)
        self.thread.start()

    def run(self) -> None:
        while not self.shutdown:
            try:
                self.poll(0.1)
            except Exception:
                logger.exception("error handling inbound message on %s:%d", self.address, self.port + 1)

    def close(self) -> None:
        self.shutdown = True

        thread = self.thread
        if thread is not None and thread is not threading.current_thread():
            thread.join()
        self.thread = None

        with self.socket_lock:
            self.pub.close()
            self.sub.close()

        super().close()
