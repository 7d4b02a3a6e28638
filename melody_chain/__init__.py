#!/usr/bin/env python3
"""Melody Chain library.

This package turns a handful of typed note tokens into new melodies.  A
typical workflow is to split the user's text with :func:`tokenize`, feed the
tokens to :func:`parse_tokens` and pass the resulting notes to
:func:`generate_melody_by_mode` together with the desired length, generation
mode and Markov order.  The returned note names can be written to disk with
:func:`melody_chain.midi_io.create_midi_file` or looked up in the table built
by :func:`build_frequency_index` for synthesis by the host application.

Underlying Algorithm
--------------------
The ``pattern`` mode learns a transition table from the training notes.  Each
window of ``order`` consecutive notes becomes a *context* and the note that
follows it is counted as an outcome.  Counts are normalised into
probabilities and generation walks the table: starting from a random context
the next note is drawn from that context's distribution and the window slides
forward by one.  When the walk reaches a context that never occurred in the
training data a note is borrowed from a random known context so the melody
can continue.

Algorithm Pseudocode
--------------------
The following outlines :func:`generate_pattern`::

    context = random_choice(chain.keys())
    melody = list(context)
    while len(melody) < length:
        if context in chain:
            next_note = weighted_pick(chain[context])
        else:
            next_note = random_choice(random_choice(chain.keys()))
        melody.append(next_note)
        context = context[1:] + (next_note,)

Two simpler strategies are also available: ``random`` draws notes from the
training set with replacement and ``default`` echoes the first ``length``
notes unchanged.

Features include:
- Token parsing that collects readable errors instead of aborting.
- Order-N Markov chains keyed by note-name tuples.
- Injectable ``random.Random`` instances for reproducible output.
- MIDI export through ``mido`` and a small command line interface.
"""

__version__ = "0.1.0"

# ---------------------------------------------------------------
# Modification Summary
# ---------------------------------------------------------------
# * Context keys are tuples of note names rather than comma-joined strings so
#   names can never clash with the separator.
# * Every sampling entry point accepts an optional ``rng`` so tests and the
#   CLI's ``--seed`` flag produce repeatable melodies.
# * ``generate_random_walk`` returns an empty list for an empty training set
#   instead of indexing into it.
# * Unknown generation modes log a warning and return an empty melody.
# ---------------------------------------------------------------

from typing import Dict, List

# Only natural note letters are accepted as the first character of a token.
VALID_LETTERS: List[str] = ["A", "B", "C", "D", "E", "F", "G"]

# Chromatic table used by the parser. Sharps are the only accidental; flats and
# double accidentals are rejected as unknown notes.
SEMITONE_MAP: Dict[str, int] = {
    "C": 0,
    "C#": 1,
    "D": 2,
    "D#": 3,
    "E": 4,
    "F": 5,
    "F#": 6,
    "G": 7,
    "G#": 8,
    "A": 9,
    "A#": 10,
    "B": 11,
}

# Octaves accepted by the parser. ``C0`` is MIDI 12 and ``B8`` is MIDI 119 so
# every parsed note stays inside the 0-127 MIDI range.
MIN_OCTAVE = 0
MAX_OCTAVE = 8
DEFAULT_OCTAVE = 4

# Reference pitch for the equal temperament formula.
A4_FREQUENCY = 440.0
A4_MIDI = 69

from .note_utils import (  # noqa: E402
    Note,
    ParseResult,
    build_frequency_index,
    get_frequency_for_note,
    make_note,
    midi_to_frequency,
    note_to_midi,
    notes_to_names,
    parse_tokens,
    tokenize,
)
from .pattern_chain import (  # noqa: E402
    ContextKey,
    PatternChain,
    build_pattern_chain,
    format_context,
    generate_pattern,
    normalize_pattern_chain,
    weighted_random_pick,
)
from .generators import (  # noqa: E402
    GENERATION_MODES,
    generate_melody_by_mode,
    generate_passthrough,
    generate_random_walk,
)
from .settings import MelodySettings, load_settings  # noqa: E402

__all__ = [
    "VALID_LETTERS",
    "SEMITONE_MAP",
    "MIN_OCTAVE",
    "MAX_OCTAVE",
    "DEFAULT_OCTAVE",
    "Note",
    "ParseResult",
    "build_frequency_index",
    "get_frequency_for_note",
    "make_note",
    "midi_to_frequency",
    "note_to_midi",
    "notes_to_names",
    "parse_tokens",
    "tokenize",
    "ContextKey",
    "PatternChain",
    "build_pattern_chain",
    "format_context",
    "generate_pattern",
    "normalize_pattern_chain",
    "weighted_random_pick",
    "GENERATION_MODES",
    "generate_melody_by_mode",
    "generate_passthrough",
    "generate_random_walk",
    "MelodySettings",
    "load_settings",
    "main",
]


def main() -> None:
    """Run the command line interface.

    Imported lazily so ``import melody_chain`` never pulls in ``argparse``
    handling or the MIDI helpers.
    """

    from .cli import main as _cli_main

    _cli_main()
