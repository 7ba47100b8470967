""" Splitting of oversized packets into fragments, and the buffer that
    puts them back together on the receiving side.

    The split arithmetic has two modes. The 'legacy' mode is byte-exact with
    deployed peers, including two quirks: the fragment count is always
    ``floor(length / size) + 1``, one more than the number of chunks when
    the length divides evenly, and the first fragment carries a split index
    of -1. The 'strict' mode counts the chunks actually produced and indexes
    them from zero. Receivers order fragments by split index either way, so
    the two only disagree on the evenly divisible case, which never
    completes under the legacy count.
"""

import collections
import copy
import logging

from .. import config
from . import packet as packets

logger = logging.getLogger(__name__)


def count(length, size, compat=config.legacy):
    """ Return the fragmentCount advertised for a serialization of *length*
        characters split into chunks of *size*.
    """

    if compat == config.legacy:
        return length // size + 1

    return -(-length // size)



def split(packet, size, compat=config.legacy):
    """ Resolve the packetId of a copy of *packet* and return the list of
        :class:`packnet.protocol.packet.Fragment` instances carrying its
        serialization in consecutive, non-overlapping chunks of at most
        *size* characters. Raises
        :class:`packnet.protocol.packet.UnresolvablePacketKind` if the
        packet cannot be resolved; nothing is produced in that case. The
        caller's *packet* is left unchanged.
    """

    packet = copy.copy(packet)
    packets.resolve(packet)
    serialized = packets.serialize(packet)

    total = count(len(serialized), size, compat)
    fragments = list()

    for start in range(0, len(serialized), size):
        chunk = serialized[start:start + size]

        if compat == config.legacy:
            index = len(fragments) - 1
        else:
            index = len(fragments)

        fragment = packets.Fragment(total, index, chunk, packet.packet_id)
        fragments.append(fragment)

    return fragments



class Reassembler:
    """ The :class:`Reassembler` holds fragments that arrived ahead of the
        rest of their packet. Fragments are grouped by key, the channel they
        arrived on; a group is complete once it holds at least as many
        fragments as the fragmentCount of the most recent arrival.

        At most *limit* incomplete groups are held at once; starting a new
        group beyond that evicts the oldest one. A *limit* of zero disables
        the bound, and None uses :func:`packnet.config.pending_limit`.

        :ivar pending: Incomplete fragment lists, keyed by channel, oldest
            first.
    """

    def __init__(self, limit=None):

        if limit is None:
            limit = config.pending_limit()

        self.limit = int(limit)
        self.pending = collections.OrderedDict()


    def __contains__(self, key):
        return key in self.pending


    def __len__(self):
        return len(self.pending)


    def add(self, key, fragment):
        """ Buffer *fragment* under *key*. If this completes the group, the
            group is removed from the buffer and the joined serialization is
            returned; otherwise the return value is None.
        """

        try:
            fragments = self.pending[key]
        except KeyError:
            self._make_room()
            fragments = list()
            self.pending[key] = fragments

        fragments.append(fragment)

        if len(fragments) < fragment.fragment_count:
            logger.debug("buffered fragment %d/%d for %s", len(fragments), fragment.fragment_count, key)
            return None

        del self.pending[key]

        fragments = sorted(fragments, key=lambda fragment: fragment.split_index)
        joined = ''.join(fragment.data for fragment in fragments)

        logger.debug("reassembled %d fragments for %s", len(fragments), key)
        return joined


    def _make_room(self):
        """ Evict the oldest incomplete groups until there is room for one
            more.
        """

        if self.limit <= 0:
            return

        while len(self.pending) >= self.limit:
            key, fragments = self.pending.popitem(last=False)
            logger.warning("evicting incomplete packet on %s, %d fragment(s) discarded", key, len(fragments))


    def clear(self):
        self.pending.clear()


# end of class Reassembler


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
