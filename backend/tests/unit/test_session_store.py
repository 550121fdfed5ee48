import pytest
from summary_server.api.mcp_streamable import SessionStore
from summary_server.core.config import ServerConfig
from summary_server.services.summary_server import SummaryInstructionsServer


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


def _server() -> SummaryInstructionsServer:
    return SummaryInstructionsServer(ServerConfig())


def test_cap_evicts_least_recently_used(clock):
    store = SessionStore(max_sessions=2, idle_ttl=60, clock=clock)
    store.add("a", _server())
    store.add("b", _server())

    # Touching "a" makes "b" the oldest
    assert store.get("a") is not None
    store.add("c", _server())

    assert len(store) == 2
    assert "b" not in store
    assert "a" in store
    assert "c" in store


def test_idle_sessions_expire(clock):
    store = SessionStore(max_sessions=10, idle_ttl=60, clock=clock)
    store.add("old", _server())
    clock.now = 30
    store.add("fresh", _server())

    clock.now = 61
    assert store.get("old") is None
    assert store.get("fresh") is not None
    assert len(store) == 1


def test_use_extends_idle_window(clock):
    store = SessionStore(max_sessions=10, idle_ttl=60, clock=clock)
    store.add("s", _server())

    clock.now = 50
    assert store.get("s") is not None
    clock.now = 100
    assert "s" in store


def test_pop_and_clear(clock):
    store = SessionStore(max_sessions=10, idle_ttl=60, clock=clock)
    server = _server()
    store.add("s", server)

    assert store.pop("s") is server
    assert store.pop("s") is None

    store.add("t", server)
    store.clear()
    assert len(store) == 0
