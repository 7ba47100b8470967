import pytest

import packnet


class Event:
    def __init__(self, identifier, value=None):
        self.identifier = identifier
        self.value = value


def test_registration_order():

    emitter = packnet.Emitter()
    seen = list()

    emitter.subscribe('a', lambda event: seen.append(('first', event.value)))
    emitter.subscribe('a', lambda event: seen.append(('second', event.value)))
    emitter.subscribe('b', lambda event: seen.append(('other', event.value)))

    emitter.publish(Event('a', 1))
    assert seen == [('first', 1), ('second', 1)]


def test_duplicate_subscription_is_idempotent():

    emitter = packnet.Emitter()
    seen = list()

    def handler(event):
        seen.append(event.value)

    emitter.subscribe('a', handler)
    emitter.subscribe('a', handler)
    emitter.subscribe_once('a', handler)

    emitter.publish(Event('a', 1))
    emitter.publish(Event('a', 2))
    assert seen == [1, 2]
    assert emitter.handlers('a') == [handler]


def test_once():

    emitter = packnet.Emitter()
    seen = list()

    emitter.subscribe_once('a', seen.append)

    first = Event('a', 1)
    emitter.publish(first)
    emitter.publish(Event('a', 2))

    assert seen == [first]
    assert emitter.handlers('a') == []


def test_once_can_be_unsubscribed_before_delivery():

    emitter = packnet.Emitter()
    seen = list()

    emitter.once('a', seen.append)
    emitter.off('a', seen.append)
    emitter.emit(Event('a'))

    assert seen == []


def test_unsubscribe():

    emitter = packnet.Emitter()
    seen = list()

    emitter.on('a', seen.append)
    emitter.unsubscribe('a', seen.append)
    emitter.unsubscribe('a', seen.append)
    emitter.unsubscribe('never', seen.append)

    emitter.publish(Event('a'))
    assert seen == []


def test_publish_without_listeners_is_a_no_op():

    emitter = packnet.Emitter()
    emitter.publish(Event('nobody'))
    emitter.publish(Event(None))
    emitter.publish(object())


def test_handler_exception_propagates():

    emitter = packnet.Emitter()
    seen = list()

    def broken(event):
        raise RuntimeError('handler failed')

    emitter.subscribe('a', broken)
    emitter.subscribe('a', seen.append)

    with pytest.raises(RuntimeError):
        emitter.publish(Event('a'))

    # The later handler never saw the event.

    assert seen == []


def test_reentrant_publish():

    emitter = packnet.Emitter()
    seen = list()

    def relay(event):
        seen.append(event.identifier)
        emitter.publish(Event('b'))

    emitter.subscribe('a', relay)
    emitter.subscribe('b', lambda event: seen.append(event.identifier))

    emitter.publish(Event('a'))
    assert seen == ['a', 'b']


def test_unsubscribe_during_delivery():

    emitter = packnet.Emitter()
    seen = list()

    def second(event):
        seen.append('second')

    def first(event):
        seen.append('first')
        emitter.unsubscribe('a', second)

    emitter.subscribe('a', first)
    emitter.subscribe('a', second)

    emitter.publish(Event('a'))
    assert seen == ['first']


def test_subscribe_during_delivery_waits_for_next_event():

    emitter = packnet.Emitter()
    seen = list()

    def late(event):
        seen.append('late')

    def first(event):
        seen.append('first')
        emitter.subscribe('a', late)

    emitter.subscribe('a', first)

    emitter.publish(Event('a'))
    assert seen == ['first']

    emitter.publish(Event('a'))
    assert seen == ['first', 'first', 'late']


def test_clear():

    emitter = packnet.Emitter()
    seen = list()

    emitter.subscribe('a', seen.append)
    emitter.subscribe('b', seen.append)

    emitter.clear('a')
    assert emitter.handlers('a') == []
    assert emitter.handlers('b') == [seen.append]

    emitter.clear()
    assert emitter.handlers('b') == []


def test_handler_must_be_callable():

    emitter = packnet.Emitter()

    with pytest.raises(TypeError):
        emitter.subscribe('a', 'not callable')


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
