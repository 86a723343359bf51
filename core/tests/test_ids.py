from __future__ import annotations

import pytest

from minisnap_core.content import ids
from minisnap_core.content.ids import is_valid_slug, new_slug
from minisnap_core.errors import RandomnessUnavailable


def test_new_slug_is_short_lowercase_base32() -> None:
    slug = new_slug()
    assert len(slug) == 8
    assert all(c in "abcdefghijklmnopqrstuvwxyz234567" for c in slug)
    assert is_valid_slug(slug)


def test_new_slugs_are_distinct() -> None:
    slugs = {new_slug() for _ in range(500)}
    assert len(slugs) == 500


def test_new_slug_fails_loudly_without_randomness(monkeypatch) -> None:
    def _broken(n: int) -> bytes:
        raise NotImplementedError("no entropy")

    monkeypatch.setattr(ids.os, "urandom", _broken)
    with pytest.raises(RandomnessUnavailable):
        new_slug()


@pytest.mark.parametrize("value", ["", "..", "a/b", "a b", "x.json", "é"])
def test_is_valid_slug_rejects_path_like_values(value: str) -> None:
    assert not is_valid_slug(value)
