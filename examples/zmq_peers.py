""" Two packs talking through a ZeroMQ broker. Run ``packnet-broker`` first,
    then run this script; it announces both packs, registers a few entities
    from each, and ships a packet large enough to need fragmenting.
"""

import logging
import time

import packnet
from packnet.protocol import Packet


def main():

    logging.basicConfig(level=logging.INFO)

    farm_transport = packnet.transport.create('zmq')
    mill_transport = packnet.transport.create('zmq')

    farm = packnet.Socket(farm_transport, {'identifier': 'farm', 'name': 'Farm', 'prefix': 'farm',
                                           'version': 1, 'packets': ['harvest']}, announce=False)
    mill = packnet.Socket(mill_transport, {'identifier': 'mill', 'name': 'Mill', 'prefix': 'mill',
                                           'version': 1, 'packets': []}, announce=False)

    mill.subscribe('farm:harvest', report)

    farm_transport.start()
    mill_transport.start()

    # Give the subscriptions a moment to reach the broker; anything
    # published before then is dropped.

    time.sleep(0.5)

    farm.announce()
    mill.announce()
    farm.register_entities(['cow', 'pig', 'sheep'])

    crops = ['wheat', 'barley', 'carrot', 'potato', 'beetroot', 'pumpkin', 'melon'] * 5
    farm.send(Packet('harvest', crops=crops))

    time.sleep(0.5)

    print('mill knows:', mill.get_pack('farm'))

    farm_transport.close()
    mill_transport.close()


def report(packet):
    print('harvest of', len(packet['crops']), 'crops arrived on', packet.identifier)


if __name__ == '__main__':
    main()


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
