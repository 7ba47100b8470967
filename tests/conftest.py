import pytest

import packnet
from packnet.protocol import packet as packets
from packnet.transport import LoopbackBus, LoopbackTransport


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """ Keep the caller's environment from leaking into the tests.
    """

    for variable in ('PACKNET_HOME', 'PACKNET_FRAGMENT_SIZE', 'PACKNET_PENDING_LIMIT',
                     'PACKNET_COMPAT', 'PACKNET_TRANSPORT', 'PACKNET_ZMQ_ADDRESS',
                     'PACKNET_ZMQ_PORT'):
        monkeypatch.delenv(variable, raising=False)

    monkeypatch.setattr(packnet.config.directory, 'found', None)


@pytest.fixture
def pack_one():
    description = dict()
    description['identifier'] = 'pk1'
    description['name'] = 'Pack One'
    description['description'] = 'd'
    description['version'] = 1
    description['prefix'] = 'p1'
    description['packets'] = ['hello']
    return description


@pytest.fixture
def bus():
    return LoopbackBus(record=True)


@pytest.fixture
def quiet_socket(bus, pack_one):
    """ A socket that has not announced itself, so the registry and the bus
        history start out empty.
    """

    return packnet.Socket(LoopbackTransport(bus), pack_one, announce=False)


def padded(packet_id, length, **extra):
    """ Return a generic packet whose serialization is exactly *length*
        characters long, padding a 'text' field to get there.
    """

    empty = packets.Packet(packet_id, text='', **extra)
    padding = length - len(packets.serialize(empty))
    assert padding >= 0

    return packets.Packet(packet_id, text='x' * padding, **extra)


@pytest.fixture
def make_packet():
    return padded


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
