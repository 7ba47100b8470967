from . import fields
from . import packet
from . import fragment

from .packet import (
    Packet,
    Discovery,
    EntitiesRegistry,
    ItemsRegistry,
    Fragment,
    PacketError,
    MalformedPacket,
    UnresolvablePacketKind,
)


"""
packnet Protocol Layer
======================

This package defines the transport-agnostic packet protocol used by
packnet: the packet variants exchanged between peers, the rules for
turning them into JSON text and back, and the fragmentation arithmetic
that keeps every transport message under the size ceiling.

The protocol layer MUST NOT depend on any transport implementation.

---------------------------------------------------------------------

Layer Architecture Overview
---------------------------

User Code
    │
    ▼
Socket (packnet.socket)
    Orchestration
    - send()
    - subscribe() / unsubscribe()
    - registry queries
    Owns the pack registry, the router and the fragment buffer

    │
    ▼
Fragmentation (fragment.py)
    - split(): packet -> ordered fragments
    - Reassembler: fragments -> packet text
    No transport awareness

    │
    ▼
Packet Model (packet.py)
    - Packet, Discovery, EntitiesRegistry, ItemsRegistry, Fragment
    - decode() / serialize() / resolve() / route()

    │
    ▼
Field Vocabulary (fields.py)
    Canonical wire names and reserved channels

---------------------------------------------------------------------

Below the Protocol Layer
------------------------

Transport (packnet.transport)
    Moves (channel, text) pairs
    - in-process loopback
    - ZeroMQ

---------------------------------------------------------------------
"""


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
