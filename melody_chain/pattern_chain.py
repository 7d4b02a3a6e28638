"""Order-N Markov chains over note names.

The functions in this module are used in sequence by the ``pattern``
generation mode:

1. :func:`build_pattern_chain` counts which note follows each window of
   ``order`` notes in the training sequence.
2. :func:`normalize_pattern_chain` converts those counts into probabilities.
3. :func:`generate_pattern` walks the chain, drawing each next note with
   :func:`weighted_random_pick`.

Contexts are stored as tuples of note names so ``("C4", "E4")`` and
``("C4,E4",)`` can never be confused.  Dictionaries keep insertion order,
which fixes the order in which :func:`weighted_random_pick` walks outcomes:
outcomes are visited in the order they were first observed in the training
data.

Example
-------
>>> import random
>>> from melody_chain import parse_tokens
>>> notes, _ = parse_tokens("c4 e4 g4 c4 e4 g4".split())
>>> chain = normalize_pattern_chain(build_pattern_chain(notes, order=1))
>>> chain[("C4",)]
{'E4': 1.0}
>>> generate_pattern(chain, 6, order=1, rng=random.Random(3))  # doctest: +SKIP
['G4', 'C4', 'E4', 'G4', 'C4', 'E4']
"""

from __future__ import annotations

import logging
import math
import random
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from .note_utils import Note

__all__ = [
    "ContextKey",
    "PatternChain",
    "build_pattern_chain",
    "normalize_pattern_chain",
    "weighted_random_pick",
    "generate_pattern",
    "format_context",
]

logger = logging.getLogger(__name__)

ContextKey = Tuple[str, ...]
PatternChain = Dict[ContextKey, Dict[str, float]]


def format_context(context: ContextKey) -> str:
    """Render ``context`` as ``"C4,E4"`` for logs and display."""

    return ",".join(context)


def build_pattern_chain(notes: Sequence[Note], order: int = 1) -> PatternChain:
    """Count the successors of every ``order``-note window in ``notes``.

    Parameters
    ----------
    notes:
        Training sequence in playing order.
    order:
        Number of preceding notes that form a context.

    Returns
    -------
    PatternChain
        Mapping of context tuple to ``{next_name: count}``.  Empty when
        ``order`` is below one or the sequence is too short to provide a
        single context/outcome pair.  The last ``order`` notes never form a
        context because nothing follows them.
    """

    chain: PatternChain = {}
    if order < 1:
        logger.warning("Markov order must be at least 1, got %d", order)
        return chain
    if len(notes) < order:
        return chain

    names = [note.name for note in notes]
    for i in range(len(names) - order):
        context = tuple(names[i:i + order])
        outcome = names[i + order]
        transitions = chain.setdefault(context, {})
        transitions[outcome] = transitions.get(outcome, 0) + 1

    logger.debug(
        "Built order-%d chain with %d contexts from %d notes",
        order,
        len(chain),
        len(names),
    )
    return chain


def normalize_pattern_chain(chain: PatternChain) -> PatternChain:
    """Convert raw counts into per-context probabilities in place.

    The same object is returned for convenience.  Apply this exactly once to a
    freshly built chain: normalising an already normalised chain treats the
    probabilities as counts again.
    """

    for transitions in chain.values():
        total = sum(transitions.values())
        if total == 0:
            continue
        for name in transitions:
            transitions[name] = transitions[name] / total
    return chain


def _as_weight(value: object) -> float:
    """Coerce ``value`` to a float, treating junk and NaN as zero."""

    try:
        weight = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return 0.0
    return 0.0 if math.isnan(weight) else weight


def weighted_random_pick(
    weights: Mapping[str, float], rng: Optional[random.Random] = None
) -> Optional[str]:
    """Choose one key of ``weights`` with probability proportional to its value.

    Entries are walked in the mapping's iteration order (insertion order for
    ``dict``) and the first key whose cumulative weight reaches the draw is
    returned.

    @param weights (Mapping[str, float]): Outcome weights; need not sum to one.
    @param rng (random.Random | None): Source of randomness. Defaults to the
        module-level :mod:`random` functions.
    @returns str | None: ``None`` for an empty mapping. When every weight is
        zero the last key is returned so callers always get a note.
    """

    entries = [(key, _as_weight(value)) for key, value in weights.items()]
    if not entries:
        return None

    total = sum(weight for _, weight in entries)
    if total == 0:
        return entries[-1][0]

    rng = rng or random
    roll = rng.random() * total
    cumulative = 0.0
    for key, weight in entries:
        cumulative += weight
        if roll <= cumulative:
            return key

    # Rounding can leave ``cumulative`` a hair below ``roll``.
    return entries[-1][0]


def generate_pattern(
    chain: PatternChain,
    length: int,
    order: int = 1,
    rng: Optional[random.Random] = None,
) -> List[str]:
    """Generate note names by walking a normalised ``chain``.

    A random context seeds the melody and is emitted in full, so the result
    holds ``max(length, order)`` names.  Each following note is drawn from
    the current context's distribution.

    When the current context never appeared in the training data (a dead
    end) a random context is chosen and one of its notes is used instead.
    This keeps the melody going but the substituted note is not conditioned
    on the preceding ``order`` notes.

    Parameters
    ----------
    chain:
        Output of :func:`normalize_pattern_chain`.
    length:
        Requested number of notes.
    order:
        The order the chain was built with.
    rng:
        Optional ``random.Random`` for reproducible output.

    Returns
    -------
    List[str]
        Generated note names, or an empty list when ``chain`` is empty.
    """

    if not chain:
        return []

    rng = rng or random
    contexts = list(chain)
    current = rng.choice(contexts)
    output = list(current)

    for _ in range(length - order):
        transitions = chain.get(current)
        if transitions:
            next_name = weighted_random_pick(transitions, rng)
        else:
            fallback = rng.choice(contexts)
            next_name = fallback[rng.randrange(len(fallback))]
            logger.debug(
                "Dead end at %s; borrowed %s from %s",
                format_context(current),
                next_name,
                format_context(fallback),
            )
        output.append(next_name)
        current = current[1:] + (next_name,)

    return output
