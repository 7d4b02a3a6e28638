"""Generation strategies and the mode dispatcher.

:func:`generate_melody_by_mode` is the single entry point used by the CLI.
It routes a request to one of three strategies:

``pattern``
    Learn a Markov chain from the training notes and walk it
    (:mod:`melody_chain.pattern_chain`).
``random``
    Draw notes uniformly from the training set with replacement.
``default``
    Echo the first ``length`` training notes unchanged.

Every strategy is total: degenerate input (no notes, zero length, an order
larger than the training set, an unknown mode) yields an empty list rather
than an exception.
"""

from __future__ import annotations

import logging
import random
from typing import List, Optional, Sequence, Tuple

from .note_utils import Note, notes_to_names
from .pattern_chain import build_pattern_chain, generate_pattern, normalize_pattern_chain

__all__ = [
    "GENERATION_MODES",
    "generate_random_walk",
    "generate_passthrough",
    "generate_melody_by_mode",
]

logger = logging.getLogger(__name__)

GENERATION_MODES: Tuple[str, ...] = ("pattern", "random", "default")


def generate_random_walk(
    notes: Sequence[Note], length: int, rng: Optional[random.Random] = None
) -> List[str]:
    """Return ``length`` names drawn independently from ``notes``.

    An empty training set produces an empty melody.
    """

    if not notes or length <= 0:
        return []
    rng = rng or random
    return [rng.choice(notes).name for _ in range(length)]


def generate_passthrough(notes: Sequence[Note], length: int) -> List[str]:
    """Return the names of the first ``length`` notes; no randomness."""

    return notes_to_names(notes[:max(length, 0)])


def generate_melody_by_mode(
    mode: str,
    notes: Sequence[Note],
    length: int,
    order: int = 1,
    rng: Optional[random.Random] = None,
) -> List[str]:
    """Generate a melody using the strategy named by ``mode``.

    @param mode (str): ``"pattern"``, ``"random"`` or ``"default"``.
    @param notes (Sequence[Note]): Training notes from :func:`parse_tokens`.
    @param length (int): Requested number of notes.
    @param order (int): Markov order, only used by ``"pattern"``.
    @param rng (random.Random | None): Optional source of randomness.
    @returns List[str]: Generated note names. Unknown modes and
        non-positive lengths return ``[]``.
    """

    if length <= 0:
        return []

    if mode == "pattern":
        # A fresh chain per request; chains are never shared between calls.
        chain = normalize_pattern_chain(build_pattern_chain(notes, order))
        if not chain:
            logger.warning(
                "Cannot learn an order-%d pattern from %d notes", order, len(notes)
            )
        return generate_pattern(chain, length, order, rng)

    if mode == "random":
        return generate_random_walk(notes, length, rng)

    if mode == "default":
        return generate_passthrough(notes, length)

    logger.warning("Unknown generation mode: %r", mode)
    return []
