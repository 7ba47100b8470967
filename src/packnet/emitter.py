""" An identifier-keyed publish/subscribe dispatcher. Events are any object
    with an ``identifier`` attribute; handlers registered under that
    identifier are invoked synchronously, in registration order.
"""

import logging

logger = logging.getLogger(__name__)


class _Subscription:

    def __init__(self, handler, once):
        self.handler = handler
        self.once = once
        self.active = True


class Emitter:
    """ The :class:`Emitter` keeps a list of handlers for every key.
        Registering the same handler twice under one key has no effect; it
        is still invoked once per event.

        Exceptions raised by a handler are not caught here: they propagate to
        whoever called :func:`publish`, and the handlers after it do not see
        that event.
    """

    def __init__(self):
        self._subscriptions = dict()


    def _find(self, key, handler):

        try:
            subscriptions = self._subscriptions[key]
        except KeyError:
            return None

        for subscription in subscriptions:
            if subscription.handler == handler:
                return subscription

        return None


    def _register(self, key, handler, once):

        if callable(handler):
            pass
        else:
            raise TypeError('handler must be callable')

        if self._find(key, handler) is not None:
            return

        try:
            subscriptions = self._subscriptions[key]
        except KeyError:
            subscriptions = list()
            self._subscriptions[key] = subscriptions

        subscriptions.append(_Subscription(handler, once))


    def handlers(self, key):
        """ Return the handlers currently registered under *key*.
        """

        try:
            subscriptions = self._subscriptions[key]
        except KeyError:
            return []

        return [subscription.handler for subscription in subscriptions]


    def subscribe(self, key, handler):
        """ Invoke *handler* with every event published under *key*.
        """

        self._register(key, handler, once=False)


    def subscribe_once(self, key, handler):
        """ Invoke *handler* with the next event published under *key*, then
            unregister it.
        """

        self._register(key, handler, once=True)


    def unsubscribe(self, key, handler):
        """ Stop invoking *handler* for *key*. No error is raised if it was
            not registered.
        """

        subscription = self._find(key, handler)

        if subscription is None:
            return

        subscription.active = False
        subscriptions = self._subscriptions[key]
        subscriptions.remove(subscription)

        if len(subscriptions) == 0:
            del self._subscriptions[key]


    def clear(self, key=None):
        """ Remove every handler for *key*, or every handler altogether if no
            key is given.
        """

        if key is None:
            keys = tuple(self._subscriptions.keys())
        else:
            keys = (key,)

        for key in keys:
            for handler in self.handlers(key):
                self.unsubscribe(key, handler)


    def publish(self, event):
        """ Deliver *event* to every handler registered under
            ``event.identifier``. An event without an identifier, or with one
            nobody listens to, is ignored.
        """

        key = getattr(event, 'identifier', None)

        if key is None:
            return

        try:
            subscriptions = self._subscriptions[key]
        except KeyError:
            return

        # Iterate over a copy, handlers are allowed to subscribe, unsubscribe
        # and publish while the event is being delivered. A handler removed
        # by an earlier handler does not see the event.

        for subscription in tuple(subscriptions):
            if subscription.active == False:
                continue

            if subscription.once:
                self.unsubscribe(key, subscription.handler)

            logger.debug("delivering %s to %r", key, subscription.handler)
            subscription.handler(event)


    # Short names, for callers used to event-emitter conventions.

    on = subscribe
    once = subscribe_once
    off = unsubscribe
    emit = publish


# end of class Emitter


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
