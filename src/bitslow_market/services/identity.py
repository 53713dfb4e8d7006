"""Coin identity generation and rendering.

A coin's identity is an ordered triple of *distinct* integers drawn from the
configured component range (``1..10`` by default, i.e. 10 * 9 * 8 = 720
possible triples). ``IdentityGenerator`` picks a triple not yet bound to any
coin; ``render_identity`` turns a triple into its stable display hash.
"""

from __future__ import annotations

import hashlib
import logging
import math
import random
from collections.abc import Iterable
from itertools import permutations
from typing import Final

from bitslow_market.core.errors import SpaceExhausted, ValidationError
from bitslow_market.core.settings import settings

logger = logging.getLogger(__name__)

BitTriple = tuple[int, int, int]

TRIPLE_SIZE: Final[int] = 3


def _md5_hex(data: str) -> str:
    return hashlib.md5(data.encode("utf-8"), usedforsecurity=False).hexdigest()


def render_identity(bit1: int, bit2: int, bit3: int) -> str:
    """Return the display hash of a bit-triple.

    Pure and deterministic: the digest of the concatenated per-component
    digests, so the preview shown before minting matches every later listing.
    """
    combined = _md5_hex(str(bit1)) + _md5_hex(str(bit2)) + _md5_hex(str(bit3))
    return _md5_hex(combined)


class IdentityGenerator:
    """Draws unused bit-triples from a fixed identity space."""

    def __init__(
        self,
        low: int | None = None,
        high: int | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self.low = settings.bit_min if low is None else low
        self.high = settings.bit_max if high is None else high
        if self.high - self.low + 1 < TRIPLE_SIZE:
            raise ValueError(
                f"Cannot draw {TRIPLE_SIZE} distinct values from [{self.low}, {self.high}]"
            )
        self._rng = rng or random.SystemRandom()

    @property
    def space_size(self) -> int:
        """Number of ordered triples of distinct components in the range."""
        return math.perm(self.high - self.low + 1, TRIPLE_SIZE)

    def validate(self, bits: Iterable[int]) -> BitTriple:
        """Return ``bits`` as a triple or raise ``ValidationError``."""
        values = tuple(bits)
        if len(values) != TRIPLE_SIZE:
            raise ValidationError(f"A bit combination has exactly {TRIPLE_SIZE} components")
        for value in values:
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValidationError("Bit components must be integers")
            if not self.low <= value <= self.high:
                raise ValidationError(
                    f"Bit components must be between {self.low} and {self.high}"
                )
        if len(set(values)) != TRIPLE_SIZE:
            raise ValidationError("Bit components must be distinct")
        return values  # type: ignore[return-value]

    def _draw(self) -> BitTriple:
        bit1, bit2, bit3 = self._rng.sample(range(self.low, self.high + 1), TRIPLE_SIZE)
        return (bit1, bit2, bit3)

    def _remaining(self, used: set[BitTriple]) -> list[BitTriple]:
        return [
            triple
            for triple in permutations(range(self.low, self.high + 1), TRIPLE_SIZE)
            if triple not in used
        ]

    def pick_unused_triple(self, used_triples: Iterable[BitTriple]) -> BitTriple:
        """Return a uniformly drawn triple absent from ``used_triples``.

        Candidates are drawn at random and rejected while already used. Once
        the number of rejected draws reaches ``space_size`` the remaining
        triples are enumerated instead, so ``SpaceExhausted`` is raised only
        when none is left.
        """
        used = {tuple(triple) for triple in used_triples}
        if len(used) >= self.space_size and not self._remaining(used):  # type: ignore[arg-type]
            logger.info("Identity space exhausted (%d triples in use)", len(used))
            raise SpaceExhausted()

        for _ in range(self.space_size):
            candidate = self._draw()
            if candidate not in used:
                return candidate

        remaining = self._remaining(used)  # type: ignore[arg-type]
        if not remaining:
            logger.info("Identity space exhausted (%d triples in use)", len(used))
            raise SpaceExhausted()
        return self._rng.choice(remaining)
