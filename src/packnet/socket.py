""" The :class:`Socket` is the piece a module actually talks to. It sends
    packets, fragmenting the large ones; it reassembles inbound fragments;
    it keeps a registry of the packs it has discovered; and it publishes
    every packet it receives to the handlers subscribed to it.
"""

import logging

from . import config
from . import emitter
from . import registry
from .protocol import fields
from .protocol import fragment
from .protocol import packet as packets

logger = logging.getLogger(__name__)


class PacketEvent:
    """ The catch-all event published under the ``packet`` identifier for
        every packet a :class:`Socket` delivers, whatever its own identifier.

        :ivar payload: The delivered :class:`packnet.protocol.packet.Packet`.
    """

    identifier = fields.ANY

    def __init__(self, payload):
        self.payload = payload


    def __repr__(self):
        return 'socket.PacketEvent: ' + repr(self.payload)


# end of class PacketEvent



class Socket(emitter.Emitter):
    """ Exchange packets with other packs over *transport*. The local *pack*
        (a :class:`packnet.registry.Pack`, or a dictionary describing one)
        supplies the prefix for outbound channels, and is announced to the
        network as soon as the socket is constructed.

        The *compat* mode, *fragment_size* and *pending_limit* default to the
        values from :mod:`packnet.config`. In 'legacy' mode the fragment
        arithmetic and the handling of item registrations match deployed
        peers exactly, quirks included; 'strict' mode corrects them.

        :ivar registry: The :class:`packnet.registry.PackRegistry` of
            discovered packs.
        :ivar fragments: The :class:`packnet.protocol.fragment.Reassembler`
            holding incomplete inbound packets.
    """

    def __init__(self, transport, pack, compat=None, fragment_size=None, pending_limit=None, announce=True):

        emitter.Emitter.__init__(self)

        if isinstance(pack, dict):
            pack = registry.Pack.from_dict(pack)

        if compat is None:
            compat = config.compat()
        if compat in config.compat_modes:
            pass
        else:
            raise ValueError('compat must be one of %s, not %s' % (config.compat_modes, repr(compat)))

        if fragment_size is None:
            fragment_size = config.fragment_size()

        self.pack = pack
        self.compat = compat
        self.fragment_size = int(fragment_size)
        self.registry = registry.PackRegistry()
        self.fragments = fragment.Reassembler(pending_limit)
        self.transport = transport

        transport.listen(self.on_raw)

        if announce:
            self.announce()


    def __enter__(self):
        return self


    def __exit__(self, *exc):
        self.close()


    def __repr__(self):
        return "socket.Socket: %s (%d pack(s) known)" % (self.pack.identifier, len(self.registry))


    def announce(self):
        """ Send the Discovery packet for the local pack.
        """

        self.send(self.pack.discovery())


    def close(self):
        """ Detach from the transport and drop any incomplete inbound
            packets. The transport itself is left open.
        """

        self.transport.listen(None)
        self.fragments.clear()


    def get_pack(self, identifier):
        """ Return the :class:`packnet.registry.Pack` discovered under
            *identifier*, or None.
        """

        return self.registry.get(identifier)


    def get_declared_packet_types(self, identifier):
        return self.registry.get_declared_packet_types(identifier)


    def get_prefix(self, identifier):
        return self.registry.get_prefix(identifier)


    def get_registered_entities(self, identifier):
        return self.registry.get_registered_entities(identifier)


    def get_registered_items(self, identifier):
        return self.registry.get_registered_items(identifier)


    def register_entities(self, entity_ids):
        """ Announce entity identifiers registered by the local pack.
        """

        self.send(packets.EntitiesRegistry(self.pack.identifier, entity_ids))


    def register_items(self, item_ids):
        """ Announce item identifiers registered by the local pack.
        """

        self.send(packets.ItemsRegistry(self.pack.identifier, item_ids))


    def send(self, packet):
        """ Send *packet*, a :class:`packnet.protocol.packet.Packet` or a
            dictionary using the wire field names, to every listening pack.

            A packet whose serialization fits in the fragment size goes out
            as-is on the channel derived from its packetId or identifier.
            Anything larger is resolved and split into fragments, each sent
            separately; if the packet cannot be resolved
            :class:`packnet.protocol.packet.UnresolvablePacketKind` is
            raised and nothing is sent.
        """

        packet = packets.decode(packet)
        serialized = packets.serialize(packet)

        # Fragments always go straight out. The fragment size bounds the
        # slice of the parent packet each one carries, not the fragment's
        # own envelope.

        if packet.is_fragment or len(serialized) <= self.fragment_size:
            self._transmit(packet, serialized)
            return

        pieces = fragment.split(packet, self.fragment_size, self.compat)

        logger.debug("sending %s as %d fragments", packet.packet_id, len(pieces))

        for piece in pieces:
            self.send(piece)


    def _transmit(self, packet, serialized):

        channel = packets.route(packet, self.pack.prefix)
        logger.debug("sending %d characters on %s", len(serialized), channel)
        self.transport.send(channel, serialized)


    def on_raw(self, channel_id, raw):
        """ The transport handler: parse the raw text of an inbound message
            and process it with :func:`on_message`. Raises
            :class:`packnet.protocol.packet.MalformedPacket` if the text is
            not a JSON object.
        """

        payload = packets.loads(raw)
        self.on_message(channel_id, payload)


    def on_message(self, channel_id, payload):
        """ Process one inbound packet received on *channel_id*. The
            *payload* is a decoded JSON object or a
            :class:`packnet.protocol.packet.Packet`.

            Fragments are buffered until their packet is complete, at which
            point the rebuilt packet is processed as if it had just arrived
            on the same channel. Any other packet is published to the
            subscribers of its identifier and of ``packet``, then applied to
            the registry if it arrived on one of the reserved channels.
        """

        while payload is not None:
            payload = self._incoming(channel_id, payload)


    def _incoming(self, channel_id, payload):
        """ Handle a single packet. Returns the payload of a packet that was
            just reassembled, which still has to be handled, or None.
        """

        if isinstance(payload, dict):
            if fields.IDENTIFIER in payload:
                pass
            else:
                payload = dict(payload)
                payload[fields.IDENTIFIER] = channel_id

        packet = packets.decode(payload)

        if packet.identifier is None:
            packet.identifier = channel_id

        if packet.is_fragment:
            joined = self.fragments.add(channel_id, packet)

            if joined is None:
                return None

            # The buffer entry is already gone; a corrupt reassembly raises
            # here without leaving stale fragments behind.

            return packets.loads(joined)

        self.publish(packet)
        self.publish(PacketEvent(packet))

        if channel_id == fields.DISCOVERY:
            self._discovered(packet)
        elif channel_id == fields.ENTITIES:
            self._registered(packet, packets.EntitiesRegistry, 'entity_ids')
        elif channel_id == fields.ITEMS:
            self._registered(packet, packets.ItemsRegistry, 'item_ids')

        return None


    def _discovered(self, packet):

        if isinstance(packet, packets.Discovery):
            pass
        else:
            logger.debug("ignoring %s on %s, it is not a discovery packet", packet, fields.DISCOVERY)
            return

        known = self.registry.has(packet.identifier)
        self.registry.set(packet.identifier, registry.Pack.from_discovery(packet))

        if known:
            logger.debug("rediscovered pack %s", packet.identifier)
        else:
            logger.info("discovered pack %s (%s), prefix %r", packet.identifier, packet.name, packet.prefix)


    def _registered(self, packet, kind, attribute):

        if isinstance(packet, kind):
            pass
        else:
            logger.debug("ignoring %s, it is not a %s packet", packet, kind.__name__)
            return

        pack = self.registry.get(packet.source)

        if pack is None:
            logger.debug("dropping %s registration from unknown pack %s", attribute, packet.source)
            return

        identifiers = getattr(packet, attribute)

        # Deployed peers record registered items in the entity list; only
        # strict mode keeps them apart.

        if kind is packets.ItemsRegistry and self.compat == config.strict:
            pack.items.extend(identifiers)
        else:
            pack.entities.extend(identifiers)


# end of class Socket



def connect(pack, transport=None, **kwargs):
    """ Factory function for a :class:`Socket`. The *pack* may be a
        :class:`packnet.registry.Pack`, a dictionary, or the name of a Pack
        description file (see :func:`packnet.config.load_pack`). If no
        *transport* is given, one is created for the backend named by
        ``PACKNET_TRANSPORT``.
    """

    from . import transport as transports

    if isinstance(pack, str):
        pack = config.load_pack(pack)

    if transport is None:
        transport = transports.create()

    return Socket(transport, pack, **kwargs)


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
