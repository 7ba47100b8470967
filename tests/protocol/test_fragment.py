import pytest

from packnet import config
from packnet.protocol import fields
from packnet.protocol import fragment
from packnet.protocol import packet as packets


def test_count():

    assert fragment.count(300, 128) == 3
    assert fragment.count(129, 128) == 2
    assert fragment.count(300, 128, config.strict) == 3
    assert fragment.count(129, 128, config.strict) == 2

    # The legacy count always has one to spare when the length divides
    # evenly; the strict count does not.

    assert fragment.count(256, 128) == 3
    assert fragment.count(256, 128, config.strict) == 2


def test_split_legacy_indexes(make_packet):

    packet = make_packet('chat', 300)
    serialized = packets.serialize(packet)

    pieces = fragment.split(packet, 128)

    assert len(pieces) == 3
    assert [piece.split_index for piece in pieces] == [-1, 0, 1]
    assert [piece.fragment_count for piece in pieces] == [3, 3, 3]
    assert [len(piece.data) for piece in pieces] == [128, 128, 44]
    assert all(piece.packet_id == 'chat' for piece in pieces)
    assert ''.join(piece.data for piece in pieces) == serialized


def test_split_strict_indexes(make_packet):

    packet = make_packet('chat', 300)
    pieces = fragment.split(packet, 128, config.strict)

    assert [piece.split_index for piece in pieces] == [0, 1, 2]
    assert [piece.fragment_count for piece in pieces] == [3, 3, 3]


def test_split_even_length(make_packet):

    packet = make_packet('chat', 256)

    pieces = fragment.split(packet, 128)
    assert len(pieces) == 2
    assert pieces[0].fragment_count == 3

    pieces = fragment.split(packet, 128, config.strict)
    assert len(pieces) == 2
    assert pieces[0].fragment_count == 2


def test_split_resolves_a_copy_before_serializing():

    packet = packets.Packet('greeting', source='pk1', entityIds=['e%d' % number for number in range(40)])
    pieces = fragment.split(packet, 128)

    assert packet.packet_id == 'greeting'
    assert all(piece.packet_id == fields.ENTITIES for piece in pieces)

    joined = ''.join(piece.data for piece in pieces)
    assert packets.loads(joined)['packetId'] == fields.ENTITIES


def test_split_unresolvable_produces_nothing():

    with pytest.raises(packets.UnresolvablePacketKind):
        fragment.split(packets.Packet(text='x' * 300), 128)


def test_reassemble_out_of_order(make_packet):

    packet = make_packet('chat', 300)
    pieces = fragment.split(packet, 128)

    reassembler = fragment.Reassembler(limit=0)

    assert reassembler.add('p1:chat', pieces[2]) is None
    assert reassembler.add('p1:chat', pieces[0]) is None
    assert 'p1:chat' in reassembler

    joined = reassembler.add('p1:chat', pieces[1])
    assert joined == packets.serialize(packet)
    assert 'p1:chat' not in reassembler
    assert len(reassembler) == 0


def test_reassemble_legacy_even_length_never_completes(make_packet):

    packet = make_packet('chat', 256)
    pieces = fragment.split(packet, 128)

    reassembler = fragment.Reassembler(limit=0)

    for piece in pieces:
        assert reassembler.add('p1:chat', piece) is None

    assert 'p1:chat' in reassembler


def test_reassemble_keys_are_independent(make_packet):

    first = fragment.split(make_packet('chat', 200), 128)
    second = fragment.split(make_packet('news', 200), 128)

    reassembler = fragment.Reassembler(limit=0)

    assert reassembler.add('p1:chat', first[0]) is None
    assert reassembler.add('p1:news', second[0]) is None
    assert len(reassembler) == 2

    assert reassembler.add('p1:news', second[1]) is not None
    assert len(reassembler) == 1
    assert 'p1:chat' in reassembler


def test_eviction_of_oldest():

    reassembler = fragment.Reassembler(limit=2)

    for key in ('a', 'b', 'c'):
        reassembler.add(key, packets.Fragment(2, 0, '{', 'x'))

    assert len(reassembler) == 2
    assert 'a' not in reassembler
    assert 'b' in reassembler
    assert 'c' in reassembler

    # Adding to a group that already exists never evicts.

    reassembler.add('b', packets.Fragment(3, 1, '}', 'x'))
    assert 'c' in reassembler


def test_default_limit_from_environment(monkeypatch):

    monkeypatch.setenv('PACKNET_PENDING_LIMIT', '5')
    assert fragment.Reassembler().limit == 5


def test_clear():

    reassembler = fragment.Reassembler(limit=0)
    reassembler.add('a', packets.Fragment(2, 0, '{', 'x'))
    reassembler.add('b', packets.Fragment(2, 0, '{', 'x'))
    assert len(reassembler) == 2

    reassembler.clear()
    assert len(reassembler) == 0


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
