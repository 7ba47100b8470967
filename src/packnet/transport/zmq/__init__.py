"""ZeroMQ transport: a broker relaying PUB/SUB traffic between peers."""

from .broker import Broker
from .publish import ZmqTransport
