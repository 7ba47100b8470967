""" Records of discovered peers ("packs"), and the registry that keeps them.
"""

from .protocol import fields
from .protocol.packet import Discovery


class Pack:
    """ The :class:`Pack` describes one module on the network: who it is,
        the prefix it namespaces its channels with, the packet types it
        declares, and the entity and item identifiers it has registered
        since it was discovered.
    """

    def __init__(self, identifier, name, description='', version=0, prefix='', packets=(), entities=None, items=None):

        if entities is None:
            entities = list()
        if items is None:
            items = list()

        self.identifier = identifier
        self.name = name
        self.description = description
        self.version = version
        self.prefix = prefix
        self.packets = list(packets)
        self.entities = list(entities)
        self.items = list(items)


    def __eq__(self, other):
        if isinstance(other, Pack):
            return self.to_dict() == other.to_dict()
        return NotImplemented


    def __repr__(self):
        return 'registry.Pack: ' + repr(self.to_dict())


    @classmethod
    def from_dict(cls, description):
        """ Build a :class:`Pack` from a dictionary using the wire field
            names, such as the contents of a Pack description file.
        """

        try:
            identifier = description[fields.IDENTIFIER]
            name = description[fields.NAME]
        except KeyError as e:
            raise ValueError('pack description is missing required field ' + str(e))

        pack = cls(identifier, name,
                   description.get(fields.DESCRIPTION, ''),
                   description.get(fields.VERSION, 0),
                   description.get(fields.PREFIX, ''),
                   description.get(fields.PACKETS, ()),
                   description.get('entities'),
                   description.get('items'))

        return pack


    @classmethod
    def from_discovery(cls, packet):
        """ Build a fresh :class:`Pack` from a received
            :class:`packnet.protocol.packet.Discovery`; the registered entity
            and item lists always start out empty.
        """

        return cls(packet.identifier, packet.name, packet.description,
                   packet.version, packet.prefix, packet.packets)


    def discovery(self):
        """ Return the :class:`packnet.protocol.packet.Discovery` packet that
            announces this pack.
        """

        return Discovery(self.identifier, self.name, self.description,
                         self.version, self.prefix, self.packets)


    def to_dict(self):
        description = dict()
        description[fields.IDENTIFIER] = self.identifier
        description[fields.NAME] = self.name
        description[fields.DESCRIPTION] = self.description
        description[fields.VERSION] = self.version
        description[fields.PREFIX] = self.prefix
        description[fields.PACKETS] = list(self.packets)
        description['entities'] = list(self.entities)
        description['items'] = list(self.items)
        return description


# end of class Pack



class PackRegistry(dict):
    """ A dictionary of :class:`Pack` records keyed by pack identifier. The
        query methods all tolerate unknown identifiers, returning an empty
        list or None rather than raising KeyError.
    """

    def __repr__(self):
        return 'registry.PackRegistry: ' + dict.__repr__(self)


    def has(self, identifier):
        return identifier in self


    def set(self, identifier, pack):
        """ Store *pack* under *identifier*, replacing any previous record
            in full.
        """

        self[identifier] = pack


    def get_declared_packet_types(self, identifier):
        """ Return the packet types declared by the pack, or an empty list if
            the pack has not been discovered.
        """

        try:
            pack = self[identifier]
        except KeyError:
            return []

        return pack.packets


    def get_prefix(self, identifier):
        """ Return the channel prefix of the pack, or None if the pack has not
            been discovered.
        """

        try:
            pack = self[identifier]
        except KeyError:
            return None

        return pack.prefix


    def get_registered_entities(self, identifier):
        try:
            return self[identifier].entities
        except KeyError:
            return []


    def get_registered_items(self, identifier):
        try:
            return self[identifier].items
        except KeyError:
            return []


# end of class PackRegistry


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
