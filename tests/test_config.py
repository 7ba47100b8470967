import os
import pytest

import packnet
from packnet import config


def test_defaults():

    assert config.fragment_size() == 128
    assert config.pending_limit() == 64
    assert config.compat() == 'legacy'
    assert config.transport() == 'loopback'
    assert config.zmq_address() == '127.0.0.1'
    assert config.zmq_port() == 10139


def test_environment_overrides(monkeypatch):

    monkeypatch.setenv('PACKNET_FRAGMENT_SIZE', '256')
    monkeypatch.setenv('PACKNET_PENDING_LIMIT', '0')
    monkeypatch.setenv('PACKNET_COMPAT', ' Strict ')
    monkeypatch.setenv('PACKNET_TRANSPORT', 'ZMQ')
    monkeypatch.setenv('PACKNET_ZMQ_PORT', '20000')

    assert config.fragment_size() == 256
    assert config.pending_limit() == 0
    assert config.compat() == 'strict'
    assert config.transport() == 'zmq'
    assert config.zmq_port() == 20000


def test_invalid_values(monkeypatch):

    monkeypatch.setenv('PACKNET_FRAGMENT_SIZE', 'big')
    with pytest.raises(ValueError):
        config.fragment_size()

    monkeypatch.setenv('PACKNET_FRAGMENT_SIZE', '0')
    with pytest.raises(ValueError):
        config.fragment_size()

    monkeypatch.setenv('PACKNET_PENDING_LIMIT', '-1')
    with pytest.raises(ValueError):
        config.pending_limit()

    monkeypatch.setenv('PACKNET_COMPAT', 'sloppy')
    with pytest.raises(ValueError):
        config.compat()


def test_socket_uses_environment(monkeypatch):

    monkeypatch.setenv('PACKNET_FRAGMENT_SIZE', '64')
    monkeypatch.setenv('PACKNET_COMPAT', 'strict')

    transport = packnet.transport.LoopbackTransport()
    socket = packnet.Socket(transport, {'identifier': 'pk1', 'name': 'P', 'prefix': 'p1'}, announce=False)

    assert socket.fragment_size == 64
    assert socket.compat == 'strict'


def test_directory(tmp_path, monkeypatch):

    monkeypatch.setenv('PACKNET_HOME', str(tmp_path))
    assert config.directory() == str(tmp_path)

    # Once found, the directory sticks.

    monkeypatch.setenv('PACKNET_HOME', '/somewhere/else')
    assert config.directory() == str(tmp_path)


def test_directory_from_home(tmp_path, monkeypatch):

    monkeypatch.setenv('HOME', str(tmp_path))
    assert config.directory() == os.path.join(str(tmp_path), '.packnet')


def test_directory_override(tmp_path, monkeypatch):

    # Registers the variable with monkeypatch, so the value directory()
    # writes is removed again after the test.

    monkeypatch.setenv('PACKNET_HOME', str(tmp_path))

    target = tmp_path / 'nested' / 'home'
    assert config.directory(str(target)) == str(target)
    assert target.is_dir()
    assert os.environ['PACKNET_HOME'] == str(target)

    with pytest.raises(ValueError):
        config.directory('relative/path')


def test_load_pack_by_path(tmp_path):

    description = tmp_path / 'mine.json'
    description.write_text('{"identifier":"pk9","name":"Nine","prefix":"n9","version":3,"packets":["a","b"]}')

    pack = config.load_pack(str(description))

    assert isinstance(pack, packnet.Pack)
    assert pack.identifier == 'pk9'
    assert pack.version == 3
    assert pack.packets == ['a', 'b']
    assert pack.entities == []


def test_load_pack_by_name(tmp_path, monkeypatch):

    monkeypatch.setenv('PACKNET_HOME', str(tmp_path))
    (tmp_path / 'packs').mkdir()
    (tmp_path / 'packs' / 'nine.json').write_text('{"identifier":"pk9","name":"Nine"}')

    assert config.load_pack('nine').name == 'Nine'


def test_load_pack_errors(tmp_path):

    broken = tmp_path / 'broken.json'
    broken.write_text('{"identifier":')
    with pytest.raises(ValueError):
        config.load_pack(str(broken))

    listed = tmp_path / 'listed.json'
    listed.write_text('["identifier"]')
    with pytest.raises(ValueError):
        config.load_pack(str(listed))

    with pytest.raises(FileNotFoundError):
        config.load_pack(str(tmp_path / 'missing.json'))


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
