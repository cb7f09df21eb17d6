"""Connection registry tests — last writer wins, compare-and-delete."""

from globalsoft.realtime.registry import ConnectionRegistry


class _Conn:
    """Any object works as a connection handle."""


def test_register_and_lookup():
    reg = ConnectionRegistry()
    c1 = _Conn()
    reg.register(1, c1)
    assert reg.lookup(1) is c1
    assert 1 in reg
    assert len(reg) == 1


def test_lookup_absent_returns_none():
    assert ConnectionRegistry().lookup(99) is None


def test_second_register_overwrites():
    """auth(u, c1) then auth(u, c2) → lookup(u) is c2."""
    reg = ConnectionRegistry()
    c1, c2 = _Conn(), _Conn()
    reg.register(1, c1)
    reg.register(1, c2)
    assert reg.lookup(1) is c2
    assert len(reg) == 1


def test_unregister_without_connection_is_unconditional():
    reg = ConnectionRegistry()
    c1, c2 = _Conn(), _Conn()
    reg.register(1, c1)
    reg.register(1, c2)
    assert reg.unregister(1) is True
    assert reg.lookup(1) is None


def test_unregister_absent_is_noop():
    reg = ConnectionRegistry()
    assert reg.unregister(5) is False
    assert reg.unregister(5, _Conn()) is False


def test_unregister_stale_connection_keeps_newer_entry():
    """A late close from the old connection must not orphan the new one."""
    reg = ConnectionRegistry()
    old, new = _Conn(), _Conn()
    reg.register(1, old)
    reg.register(1, new)

    assert reg.unregister(1, old) is False
    assert reg.lookup(1) is new

    assert reg.unregister(1, new) is True
    assert reg.lookup(1) is None


def test_registries_are_independent():
    a, b = ConnectionRegistry(), ConnectionRegistry()
    a.register(1, _Conn())
    assert b.lookup(1) is None
