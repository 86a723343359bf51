from __future__ import annotations

from datetime import timedelta

import pytest

from minisnap_core import sessions as sessions_mod
from minisnap_core.errors import RandomnessUnavailable
from minisnap_core.sessions import DEFAULT_SESSION_TTL, SessionRegistry


def test_create_then_validate(clock) -> None:
    registry = SessionRegistry(clock=clock)

    token, expires = registry.create()
    assert len(token) >= 40
    assert expires == clock.now + DEFAULT_SESSION_TTL
    assert registry.validate(token) is True


def test_tokens_are_unique(clock) -> None:
    registry = SessionRegistry(clock=clock)
    tokens = {registry.create()[0] for _ in range(100)}
    assert len(tokens) == 100


def test_empty_and_unknown_tokens_are_invalid(clock) -> None:
    registry = SessionRegistry(clock=clock)
    assert registry.validate("") is False
    assert registry.validate(None) is False
    assert registry.validate("nope") is False


def test_remove_is_idempotent(clock) -> None:
    registry = SessionRegistry(clock=clock)
    token, _ = registry.create()

    registry.remove(token)
    registry.remove(token)
    registry.remove("")
    registry.remove("unknown")

    assert registry.validate(token) is False


def test_expired_token_is_evicted_lazily(clock) -> None:
    registry = SessionRegistry(clock=clock)
    token, _ = registry.create()

    clock.advance(hours=23, minutes=59)
    assert registry.validate(token) is True

    clock.advance(minutes=1)
    assert registry.validate(token) is False
    assert len(registry) == 0


def test_purge_expired(clock) -> None:
    registry = SessionRegistry(ttl=timedelta(minutes=10), clock=clock)
    old, _ = registry.create()
    clock.advance(minutes=6)
    fresh, _ = registry.create()
    clock.advance(minutes=5)

    assert registry.purge_expired() == 1
    assert len(registry) == 1
    assert registry.validate(fresh) is True
    assert registry.validate(old) is False


def test_token_generation_fails_loudly(monkeypatch, clock) -> None:
    def _broken(nbytes: int) -> str:
        raise NotImplementedError("no entropy")

    monkeypatch.setattr(sessions_mod.secrets, "token_urlsafe", _broken)
    registry = SessionRegistry(clock=clock)

    with pytest.raises(RandomnessUnavailable):
        registry.create()
    assert len(registry) == 0
