""" Python implementation of packnet, a small protocol for exchanging JSON
    packets between independent modules over a transport that only carries
    short, channel-tagged text messages. Large packets are fragmented and
    reassembled transparently; modules discover each other by announcing a
    description of themselves.
"""

__version__ = "0.3.0"

# Utility components.

from . import json
from . import config

# Submodules used by multiple other components.

from . import protocol
from . import emitter
from . import registry
from . import transport

# Primary public-facing interfaces.

from . import socket
connect = socket.connect

from .socket import Socket, PacketEvent
from .registry import Pack, PackRegistry
from .emitter import Emitter

# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
