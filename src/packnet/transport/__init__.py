"""Transport layer implementations."""

from .. import config

from .base import (
    Transport,
    TransportError,
    TransportClosed,
    TransportPortError,
)
from .loopback import LoopbackBus, LoopbackTransport
from .zmq import Broker, ZmqTransport


def create(backend=None, **kwargs):
    """Return a new transport for *backend*, ``loopback`` or ``zmq``.

    The backend defaults to the ``PACKNET_TRANSPORT`` environment variable;
    keyword arguments are passed to the transport constructor.
    """

    if backend is None:
        backend = config.transport()

    if backend == "loopback":
        return LoopbackTransport(**kwargs)
    if backend == "zmq":
        return ZmqTransport(**kwargs)

    raise ValueError(f"unknown PACKNET_TRANSPORT backend: {backend!r}")
