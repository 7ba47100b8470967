"""Protocol constants.

Keep these in one place to avoid stringly-typed packet handling.
"""

# Reserved channels/packet ids.

DISCOVERY = "global:discovery"
ENTITIES = "global:entities"
ITEMS = "global:items"

# Identifier of the catch-all event published for every delivered packet.

ANY = "packet"

# Separator between a channel's namespace and the packet kind.

SEPARATOR = ":"

# Wire field names.

PACKET_ID = "packetId"
IDENTIFIER = "identifier"
IS_FRAGMENT = "isFragment"

NAME = "name"
DESCRIPTION = "description"
VERSION = "version"
PREFIX = "prefix"
PACKETS = "packets"

SOURCE = "source"
ENTITY_IDS = "entityIds"
ITEM_IDS = "itemIds"

FRAGMENT_COUNT = "fragmentCount"
SPLIT_INDEX = "splitIndex"
DATA = "data"
