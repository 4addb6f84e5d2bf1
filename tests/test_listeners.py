import logging

import pytest

import mythproto
from mythproto.listeners import Listeners


class Referenced:

    def __init__(self):
        self.received = list()

    def a_method(self, event):
        self.received.append(event)


def test_persistent_object():
    thing = Referenced()

    reference = mythproto.listeners.ref(thing)
    assert reference is not None
    assert callable(reference)

    dereferenced = reference()
    assert dereferenced is not None


def test_persistent_object_method():
    """ This is the reason the local weak reference wrapper exists, and why
        weakref.WeakMethod exists: the standard weakref.ref() reference cannot
        refer to a bound method, as they immediately lose scope and are
        deallocated.
    """

    thing = Referenced()

    reference = mythproto.listeners.ref(thing.a_method)
    assert reference is not None
    assert callable(reference)

    dereferenced = reference()
    assert dereferenced is not None
    assert callable(dereferenced)


def test_removed_object_method():
    thing = Referenced()

    reference = mythproto.listeners.ref(thing.a_method)
    assert reference is not None

    del thing

    dereferenced = reference()
    assert dereferenced is None


def test_propagate_in_order():

    order = list()

    def first(event):
        order.append(('first', event))

    def second(event):
        order.append(('second', event))

    listeners = Listeners()
    listeners.add(first)
    listeners.add(second)
    listeners.add(first)

    assert len(listeners) == 2

    listeners.propagate('one')
    assert order == [('first', 'one'), ('second', 'one')]


def test_remove():

    thing = Referenced()

    listeners = Listeners()
    listeners.add(thing.a_method)
    listeners.remove(thing.a_method)
    listeners.remove(thing.a_method)

    listeners.propagate('ignored')
    assert thing.received == []
    assert len(listeners) == 0


def test_dead_listeners_drop_out():

    survivor = Referenced()
    doomed = Referenced()

    listeners = Listeners()
    listeners.add(survivor.a_method)
    listeners.add(doomed.a_method)
    assert len(listeners) == 2

    del doomed
    assert len(listeners) == 1

    listeners.propagate('event')
    assert survivor.received == ['event']
    assert len(listeners.references) == 1


def test_failing_listener(caplog):
    """ One broken listener does not keep the event from the others.
    """

    def broken(event):
        raise RuntimeError('broken listener')

    thing = Referenced()

    listeners = Listeners()
    listeners.add(broken)
    listeners.add(thing.a_method)

    with caplog.at_level(logging.ERROR, logger='mythproto.listeners'):
        listeners.propagate('event')

    assert thing.received == ['event']
    assert 'broken listener' in caplog.text


def test_not_callable():

    listeners = Listeners()

    with pytest.raises(TypeError):
        listeners.add('not a function')


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
