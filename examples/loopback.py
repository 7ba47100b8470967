""" Packs sharing an in-process loopback bus, with delivery deliberately
    shuffled so fragments arrive out of order.
"""

import packnet
from packnet.protocol import Packet
from packnet.transport import LoopbackBus, LoopbackTransport


def main():

    bus = LoopbackBus(autoflush=False, shuffle=True, seed=1)

    alpha = packnet.Socket(LoopbackTransport(bus), {'identifier': 'alpha', 'name': 'Alpha',
                                                    'prefix': 'a', 'packets': ['story']})
    beta = packnet.Socket(LoopbackTransport(bus), {'identifier': 'beta', 'name': 'Beta',
                                                   'prefix': 'b', 'packets': []})

    beta.subscribe('a:story', lambda packet: print('beta read:', packet['text']))
    beta.subscribe('packet', lambda event: print('beta saw', event.payload.identifier))

    alpha.send(Packet('story', text='Once upon a time, ' * 20))
    bus.flush()

    alpha.announce()
    bus.flush()

    print(beta.get_pack('alpha'))
    print(alpha.get_pack('beta'))


if __name__ == '__main__':
    main()


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
