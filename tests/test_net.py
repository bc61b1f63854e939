import socket
from contextlib import nullcontext

from tractive_exporter.core.net import is_reachable


def test_is_reachable_true_when_connect_succeeds(monkeypatch):
    seen = {}

    def fake_create_connection(address, timeout=None):
        seen.update(address=address, timeout=timeout)
        return nullcontext()

    monkeypatch.setattr("tractive_exporter.core.net.socket.create_connection", fake_create_connection)

    assert is_reachable("graph.tractive.com", 443, timeout_seconds=1.0) is True
    assert seen == {"address": ("graph.tractive.com", 443), "timeout": 1.0}


def test_is_reachable_false_on_socket_errors(monkeypatch):
    def fake_create_connection(address, timeout=None):  # noqa: ARG001
        raise socket.timeout("timed out")

    monkeypatch.setattr("tractive_exporter.core.net.socket.create_connection", fake_create_connection)

    assert is_reachable("graph.tractive.com") is False
