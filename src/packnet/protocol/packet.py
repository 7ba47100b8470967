""" Class representations of packnet packets, including subclasses for the
    reserved packet variants, and the functions that move packets across
    the JSON text boundary of the transport.
"""

from .. import json
from . import fields


class PacketError(Exception):
    """Base class for all packet-level errors."""


class MalformedPacket(PacketError, ValueError):
    """Inbound text or a decoded object is not a valid packet."""


class UnresolvablePacketKind(PacketError):
    """A packet cannot be assigned a packetId, and cannot be routed."""


_missing = object()


class Packet:
    """ The :class:`Packet` is the unit exchanged between peers. The known
        fields are attributes; anything else received on the wire is kept
        in the *extra* dictionary so that it survives a decode/encode
        round trip unchanged.

        :ivar packet_id: The semantic type of the packet, if any.
        :ivar identifier: The channel the packet was sent or received on.
        :ivar extra: Additional JSON-compatible fields, keyed by wire name.
    """

    default_id = None
    is_fragment = False

    def __init__(self, packet_id=None, identifier=None, **extra):

        if packet_id is None:
            packet_id = self.default_id

        self.packet_id = packet_id
        self.identifier = identifier
        self.extra = extra


    def __eq__(self, other):
        if isinstance(other, Packet):
            return type(self) is type(other) and self.to_dict() == other.to_dict()
        return NotImplemented


    def __repr__(self):
        return type(self).__name__ + ': ' + serialize(self)


    def __getitem__(self, key):
        return self.to_dict()[key]


    def get(self, key, default=None):
        """ Return the value of the wire field *key*, or *default*.
        """

        return self.to_dict().get(key, default)


    def _fields(self):
        """ Variant-specific wire fields, as (name, value) pairs in the order
            they appear on the wire.
        """

        return ()


    def to_dict(self):
        """ Return the wire representation of this packet as a dictionary.
        """

        packet = dict()

        if self.is_fragment:
            packet[fields.IS_FRAGMENT] = True
        elif fields.IS_FRAGMENT in self.extra:
            packet[fields.IS_FRAGMENT] = self.extra[fields.IS_FRAGMENT]

        if self.packet_id is not None:
            packet[fields.PACKET_ID] = self.packet_id

        if self.identifier is not None:
            packet[fields.IDENTIFIER] = self.identifier

        for key,value in self._fields():
            packet[key] = value

        for key,value in self.extra.items():
            if key in packet:
                continue
            packet[key] = value

        return packet


# end of class Packet



class Discovery(Packet):
    """ The self-announcement a peer broadcasts so that others can record
        its identity and the packet types it deals in.
    """

    default_id = fields.DISCOVERY

    def __init__(self, identifier, name, description='', version=0, prefix='', packets=(), packet_id=None, **extra):

        Packet.__init__(self, packet_id, identifier, **extra)

        self.name = name
        self.description = description
        self.version = version
        self.prefix = prefix
        self.packets = list(packets)


    def _fields(self):
        return ((fields.NAME, self.name),
                (fields.DESCRIPTION, self.description),
                (fields.VERSION, self.version),
                (fields.PREFIX, self.prefix),
                (fields.PACKETS, self.packets))


# end of class Discovery



class EntitiesRegistry(Packet):
    """ Declares entity identifiers registered by the peer named in *source*.
    """

    default_id = fields.ENTITIES

    def __init__(self, source, entity_ids, packet_id=None, identifier=None, **extra):

        Packet.__init__(self, packet_id, identifier, **extra)

        self.source = source
        self.entity_ids = list(entity_ids)


    def _fields(self):
        return ((fields.SOURCE, self.source),
                (fields.ENTITY_IDS, self.entity_ids))


# end of class EntitiesRegistry



class ItemsRegistry(Packet):
    """ Declares item identifiers registered by the peer named in *source*.
    """

    default_id = fields.ITEMS

    def __init__(self, source, item_ids, packet_id=None, identifier=None, **extra):

        Packet.__init__(self, packet_id, identifier, **extra)

        self.source = source
        self.item_ids = list(item_ids)


    def _fields(self):
        return ((fields.SOURCE, self.source),
                (fields.ITEM_IDS, self.item_ids))


# end of class ItemsRegistry



class Fragment(Packet):
    """ One transmission-sized slice of the serialized form of a larger
        packet. The *packet_id* is shared by every fragment of the same
        logical packet; *split_index* orders the slices on reassembly.
    """

    is_fragment = True

    def __init__(self, fragment_count, split_index, data, packet_id=None, identifier=None, **extra):

        Packet.__init__(self, packet_id, identifier, **extra)

        self.fragment_count = fragment_count
        self.split_index = split_index
        self.data = data


    def _fields(self):
        return ((fields.FRAGMENT_COUNT, self.fragment_count),
                (fields.DATA, self.data),
                (fields.SPLIT_INDEX, self.split_index))


# end of class Fragment



def _take(payload, key, kind, default=_missing):
    """ Remove and return *key* from the *payload* dictionary, checking that
        the value is an instance of *kind*. Booleans are not accepted where
        an integer is expected.
    """

    try:
        value = payload.pop(key)
    except KeyError:
        if default is _missing:
            raise MalformedPacket('packet is missing required field ' + repr(key))
        return default

    if value is None and default is not _missing:
        return default

    if kind is int and isinstance(value, bool):
        valid = False
    else:
        valid = isinstance(value, kind)

    if valid:
        return value

    raise MalformedPacket("packet field %s must be %s, not %s" % (repr(key), kind.__name__, type(value).__name__))


def _take_strings(payload, key):

    values = _take(payload, key, list)

    for value in values:
        if isinstance(value, str):
            continue
        raise MalformedPacket("packet field %s must only contain strings, found %s" % (repr(key), repr(value)))

    return values



def decode(payload):
    """ Build the appropriate :class:`Packet` subclass from a decoded JSON
        object. The variant is chosen by structural shape: a set
        ``isFragment`` flag, then the presence of ``packets``, ``itemIds``,
        or ``entityIds``; anything else is a generic :class:`Packet`.
        :class:`Packet` instances are returned as-is.
    """

    if isinstance(payload, Packet):
        return payload

    if isinstance(payload, dict):
        pass
    else:
        raise MalformedPacket('packet must be a JSON object, not ' + type(payload).__name__)

    payload = dict(payload)

    packet_id = _take(payload, fields.PACKET_ID, str, None)
    identifier = _take(payload, fields.IDENTIFIER, str, None)

    # An explicit false flag stays in the payload, and so in the extra
    # fields, so that it is encoded again.

    is_fragment = payload.get(fields.IS_FRAGMENT, False)

    if is_fragment:
        del payload[fields.IS_FRAGMENT]
        count = _take(payload, fields.FRAGMENT_COUNT, int)
        index = _take(payload, fields.SPLIT_INDEX, int)
        data = _take(payload, fields.DATA, str)
        packet = Fragment(count, index, data, packet_id, identifier)

    elif fields.PACKETS in payload:
        if identifier is None:
            raise MalformedPacket('discovery packet is missing required field ' + repr(fields.IDENTIFIER))

        name = _take(payload, fields.NAME, str)
        description = _take(payload, fields.DESCRIPTION, str, '')
        version = _take(payload, fields.VERSION, int, 0)
        prefix = _take(payload, fields.PREFIX, str)
        packets = _take_strings(payload, fields.PACKETS)
        packet = Discovery(identifier, name, description, version, prefix, packets, packet_id)

    elif fields.ITEM_IDS in payload:
        source = _take(payload, fields.SOURCE, str)
        item_ids = _take_strings(payload, fields.ITEM_IDS)
        packet = ItemsRegistry(source, item_ids, packet_id, identifier)

    elif fields.ENTITY_IDS in payload:
        source = _take(payload, fields.SOURCE, str)
        entity_ids = _take_strings(payload, fields.ENTITY_IDS)
        packet = EntitiesRegistry(source, entity_ids, packet_id, identifier)

    else:
        packet = Packet(packet_id, identifier)

    # Decoding never fills in a default packetId; an absent one stays absent
    # so the packet re-encodes exactly as it arrived. Whatever is left over
    # is not part of the variant, keep it verbatim.

    packet.packet_id = packet_id
    packet.extra.update(payload)
    return packet



def loads(raw):
    """ Parse the raw text of a transport message into a dictionary. Raises
        :class:`MalformedPacket` if the text is not a JSON object.
    """

    try:
        payload = json.loads(raw)
    except json.JSONDecodeError as e:
        raise MalformedPacket('packet is not valid JSON: ' + str(e))

    if isinstance(payload, dict):
        return payload

    raise MalformedPacket('packet must be a JSON object, not ' + type(payload).__name__)



def serialize(packet):
    """ Return the compact JSON text of a packet, the form that is measured
        against the fragment size and put on the wire.
    """

    return json.dumps_text(packet.to_dict())



def resolve(packet):
    """ Assign the reserved packetId matching the shape of *packet*: a
        ``packets`` field makes it a discovery packet, ``itemIds`` an items
        registry packet, ``entityIds`` an entities registry packet. A packet
        of any other shape keeps the packetId it was given; if it has none,
        :class:`UnresolvablePacketKind` is raised. The packet is modified
        in place and returned.
    """

    shape = packet.to_dict()

    if fields.PACKETS in shape:
        packet.packet_id = fields.DISCOVERY
    elif fields.ITEM_IDS in shape:
        packet.packet_id = fields.ITEMS
    elif fields.ENTITY_IDS in shape:
        packet.packet_id = fields.ENTITIES
    elif packet.packet_id:
        pass
    else:
        raise UnresolvablePacketKind('packetId is missing in the provided packet, and its shape matches no reserved packet')

    return packet



def route(packet, prefix):
    """ Return the channel a packet is sent on: its packetId, falling back
        to its identifier, namespaced by *prefix*. A kind that is already
        namespaced, such as the reserved ``global:*`` ids, is used verbatim.
    """

    kind = packet.packet_id or packet.identifier

    if kind:
        pass
    else:
        raise UnresolvablePacketKind('packet has neither a packetId nor an identifier to route it by')

    if fields.SEPARATOR in kind:
        return kind

    return prefix + fields.SEPARATOR + kind


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
