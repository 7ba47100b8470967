"""A ZeroMQ broker relaying packnet traffic between peers.

Peers publish into the broker's XSUB socket and receive everything the
broker forwards out of its XPUB socket, which makes the broker the
equivalent of the shared event system of the in-process loopback bus.
By convention the XSUB socket listens on *port* and the XPUB socket on
*port* + 1.
"""

from __future__ import annotations

import argparse
import logging
import threading
from typing import Optional

import zmq

from ... import config
from ..base import TransportPortError

logger = logging.getLogger(__name__)

minimum_port = 10139
maximum_port = 13679


class Broker:
    """Relay every message from any publisher to every subscriber.

    If no *port* is specified the first free pair of ports in the default
    range is used. Call :meth:`start` to relay from a background thread,
    or :meth:`run` to relay from the calling thread.

    :ivar port: The port publishers connect to; subscribers use port + 1.
    """

    def __init__(self, port: Optional[int] = None, address: str = "*"):
        context = zmq.Context.instance()

        self.address = address
        self.frontend = context.socket(zmq.XSUB)
        self.frontend.setsockopt(zmq.LINGER, 0)
        self.backend = context.socket(zmq.XPUB)
        self.backend.setsockopt(zmq.LINGER, 0)

        if port is None:
            candidates = range(minimum_port, maximum_port, 2)
        else:
            candidates = (int(port),)

        self.port = None
        for trial in candidates:
            if self._bind(trial):
                self.port = trial
                break

        if self.port is None:
            self.frontend.close()
            self.backend.close()

            if port is None:
                error = f"no ports available in range {minimum_port}:{maximum_port}"
            else:
                error = f"ports already in use: {port}, {int(port) + 1}"
            raise TransportPortError(error)

        self.shutdown = False
        self.thread: Optional[threading.Thread] = None

    def _bind(self, port: int) -> bool:
        try:
            self.frontend.bind(f"tcp://{self.address}:{port}")
        except zmq.ZMQError:
            return False

        try:
            self.backend.bind(f"tcp://{self.address}:{port + 1}")
        except zmq.ZMQError:
            self.frontend.unbind(self.frontend.last_endpoint)
            return False

        return True

    def start(self) -> None:
        self.thread = threading.Thread(target=self.run, daemon=True)
        self.thread.start()

    def run(self) -> None:
        poller = zmq.Poller()
        poller.register(self.frontend, zmq.POLLIN)
        poller.register(self.backend, zmq.POLLIN)

        logger.info("broker relaying on ports %d and %d", self.port, self.port + 1)

        while not self.shutdown:
            for active, _flag in poller.poll(100):
                if active == self.frontend:
                    # Published traffic flows out to the subscribers...
                    self.backend.send_multipart(self.frontend.recv_multipart())
                elif active == self.backend:
                    # ...and subscriptions flow back to the publishers.
                    self.frontend.send_multipart(self.backend.recv_multipart())

    def close(self) -> None:
        self.shutdown = True

        thread = self.thread
        if thread is not None and thread is not threading.current_thread():
            thread.join()

        self.thread = None
        self.frontend.close()
        self.backend.close()


def main(argv=None) -> None:
    parser = argparse.ArgumentParser(description="Relay packnet traffic between ZeroMQ peers.")
    parser.add_argument("--address", default="*", help="interface to listen on (default: all)")
    parser.add_argument("--port", type=int, default=None,
                        help="publisher port; subscribers use port + 1 (default: PACKNET_ZMQ_PORT or %d)" % config.default_zmq_port)
    parser.add_argument("-v", "--verbose", action="store_true", help="log every relayed message")
    args = parser.parse_args(argv)

    level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(level=level, format="%(asctime)s %(name)s %(levelname)s: %(message)s")

    port = args.port
    if port is None:
        port = config.zmq_port()

    broker = Broker(port, args.address)

    try:
        broker.run()
    except KeyboardInterrupt:
        pass
    finally:
        broker.close()


if __name__ == "__main__":
    main()
