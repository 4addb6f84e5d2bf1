""" Weakly referenced event listeners. A listener registered here does not
    keep its owner alive: once the object behind a bound method (or the
    function itself) is garbage collected, the listener silently drops out
    of the registry the next time events are delivered.
"""

import logging
import threading
import weakref

logger = logging.getLogger(__name__)


def ref(thing):
    """ Return a weak reference to the supplied argument, regardless of
        whether it is a plain callable or a bound method. A plain
        ``weakref.ref()`` to a bound method dies immediately, since the
        method object is created anew on every attribute access.
    """

    try:
        thing.__func__
        thing.__self__
    except AttributeError:
        return weakref.ref(thing)
    else:
        return weakref.WeakMethod(thing)


class Listeners:
    """ An ordered set of weakly referenced callables, all invoked with the
        same argument by :func:`propagate`.
    """

    def __init__(self):

        self.references = list()
        self.lock = threading.Lock()


    def add(self, listener):

        if callable(listener):
            pass
        else:
            raise TypeError('listener must be callable')

        reference = ref(listener)

        with self.lock:
            if reference in self.references:
                return
            self.references.append(reference)


    def remove(self, listener):
        """ Remove *listener*; removing one that was never added is not an
            error.
        """

        reference = ref(listener)

        with self.lock:
            try:
                self.references.remove(reference)
            except ValueError:
                pass


    def propagate(self, event):
        """ Invoke every live listener with *event*, in registration order.
            An exception raised by one listener is logged and does not stop
            delivery to the others.
        """

        with self.lock:
            references = list(self.references)

        if references:
            pass
        else:
            return

        invalid = list()

        for reference in references:
            listener = reference()

            if listener is None:
                invalid.append(reference)
                continue

            try:
                listener(event)
            except Exception:
                logger.exception("event listener %r failed on %r", listener, event)
                continue

        if invalid:
            with self.lock:
                for reference in invalid:
                    try:
                        self.references.remove(reference)
                    except ValueError:
                        pass


    def __len__(self):

        with self.lock:
            references = list(self.references)

        return len([reference for reference in references if reference() is not None])


# end of class Listeners


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
