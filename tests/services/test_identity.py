# tests/services/test_identity.py
"""Tests for bit-triple generation and identity rendering."""

from __future__ import annotations

import random
from itertools import permutations

import pytest

from bitslow_market.core.errors import SpaceExhausted, ValidationError
from bitslow_market.services.identity import IdentityGenerator, render_identity


def _all_triples(low: int, high: int) -> list[tuple[int, int, int]]:
    return list(permutations(range(low, high + 1), 3))


class TestRenderIdentity:
    def test_is_deterministic(self) -> None:
        assert render_identity(2, 5, 9) == render_identity(2, 5, 9)

    def test_known_digest(self) -> None:
        """The digest is md5 over the concatenated per-component md5 hex strings."""
        import hashlib

        parts = "".join(hashlib.md5(str(b).encode()).hexdigest() for b in (1, 2, 3))
        assert render_identity(1, 2, 3) == hashlib.md5(parts.encode()).hexdigest()

    def test_order_matters(self) -> None:
        assert render_identity(1, 2, 3) != render_identity(3, 2, 1)


class TestIdentityGenerator:
    def test_space_size_for_default_range(self) -> None:
        assert IdentityGenerator(1, 10).space_size == 720

    def test_rejects_range_smaller_than_a_triple(self) -> None:
        with pytest.raises(ValueError):
            IdentityGenerator(1, 2)

    def test_pick_returns_distinct_components_in_range(self) -> None:
        generator = IdentityGenerator(1, 10, rng=random.Random(7))
        for _ in range(50):
            triple = generator.pick_unused_triple(set())
            assert len(set(triple)) == 3
            assert all(1 <= bit <= 10 for bit in triple)

    def test_pick_never_returns_used_triple(self) -> None:
        generator = IdentityGenerator(1, 4, rng=random.Random(3))
        triples = _all_triples(1, 4)
        used = set(triples[:-1])
        assert generator.pick_unused_triple(used) == triples[-1]

    def test_pick_with_two_remaining_returns_one_of_them(self) -> None:
        generator = IdentityGenerator(1, 10, rng=random.Random(11))
        triples = _all_triples(1, 10)
        remaining = {triples[100], triples[500]}
        used = set(triples) - remaining
        for _ in range(10):
            assert generator.pick_unused_triple(used) in remaining

    def test_exhausted_space_raises(self) -> None:
        generator = IdentityGenerator(1, 4)
        with pytest.raises(SpaceExhausted):
            generator.pick_unused_triple(_all_triples(1, 4))

    def test_unlucky_draws_fall_back_to_enumeration(self) -> None:
        """A run of rejected draws must not be reported as exhaustion."""
        triples = _all_triples(1, 3)
        used = set(triples[1:])

        class StuckRandom(random.Random):
            def sample(self, population, k, *, counts=None):  # type: ignore[override]
                return list(triples[-1])

        generator = IdentityGenerator(1, 3, rng=StuckRandom())
        assert generator.pick_unused_triple(used) == triples[0]

    @pytest.mark.parametrize(
        "bits",
        [(1, 2), (1, 2, 3, 4), (0, 2, 3), (1, 2, 11), (4, 4, 5), (1, "2", 3), (True, 2, 3)],
    )
    def test_validate_rejects_malformed_triples(self, bits) -> None:
        with pytest.raises(ValidationError):
            IdentityGenerator(1, 10).validate(bits)

    def test_validate_returns_tuple(self) -> None:
        assert IdentityGenerator(1, 10).validate([2, 5, 9]) == (2, 5, 9)
