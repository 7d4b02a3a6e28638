"""Helpers for turning note tokens into structured pitch data.

This module groups everything dealing with note representation: parsing the
raw tokens typed by a user, deriving MIDI numbers and frequencies, and the
small name/frequency lookups the host uses for synthesis.  It is kept apart
from the generation code so callers that only need validation do not import
the Markov machinery.

Example
-------
>>> from melody_chain.note_utils import parse_tokens
>>> notes, errors = parse_tokens(["c4", "e", "h2"])
>>> [n.name for n in notes]
['C4', 'E4']
>>> errors
["Invalid note letter 'H' in token 2"]
"""

# Modification Summary
# ---------------------
# * ``parse_tokens`` returns a ``ParseResult`` named tuple so callers can
#   unpack ``notes, errors`` directly or access the fields by name.
# * Octave suffixes are read from their leading signed digits, so ``C4x``
#   parses as ``C4`` and ``D4.5`` as ``D4``. Suffixes without leading digits
#   are reported as invalid octaves.
# * Added ``note_to_midi`` for canonical note names so the MIDI writer does
#   not need to reparse user tokens.

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Dict, Iterable, List, NamedTuple, Optional, Sequence

from . import (
    A4_FREQUENCY,
    A4_MIDI,
    DEFAULT_OCTAVE,
    MAX_OCTAVE,
    MIN_OCTAVE,
    SEMITONE_MAP,
    VALID_LETTERS,
)

__all__ = [
    "Note",
    "ParseResult",
    "parse_tokens",
    "tokenize",
    "make_note",
    "notes_to_names",
    "note_to_midi",
    "midi_to_frequency",
    "build_frequency_index",
    "get_frequency_for_note",
]

logger = logging.getLogger(__name__)

_OCTAVE_RE = re.compile(r"[+-]?\d+", re.ASCII)
_NAME_RE = re.compile(r"([A-G]#?)(\d+)", re.ASCII)


@dataclass(frozen=True)
class Note:
    """A single parsed pitch.

    ``semitone``, ``midi`` and ``frequency`` are derived from the first three
    fields by :func:`make_note`; constructing a ``Note`` directly skips those
    calculations, so prefer the helper.
    """

    letter: str
    accidental: Optional[str]
    octave: int
    semitone: int
    midi: int
    frequency: float

    @property
    def name(self) -> str:
        """Canonical name such as ``C#4`` used as the note's identity."""
        return f"{self.letter}{self.accidental or ''}{self.octave}"


class ParseResult(NamedTuple):
    """Valid notes in input order plus one message per rejected token."""

    notes: List[Note]
    errors: List[str]


def midi_to_frequency(midi: int) -> float:
    """Return the equal temperament frequency of ``midi`` referenced to A4."""

    return A4_FREQUENCY * 2 ** ((midi - A4_MIDI) / 12)


def make_note(letter: str, accidental: Optional[str], octave: int) -> Note:
    """Build a :class:`Note` with its derived MIDI number and frequency.

    Parameters
    ----------
    letter:
        Natural note letter ``A``-``G``.
    accidental:
        ``"#"`` for a sharp or ``None``.
    octave:
        Octave number between ``MIN_OCTAVE`` and ``MAX_OCTAVE``.

    Raises
    ------
    ValueError
        If the pitch is not in :data:`melody_chain.SEMITONE_MAP` or the octave
        is out of range.
    """

    key = letter + (accidental or "")
    if key not in SEMITONE_MAP:
        raise ValueError(f"Unknown note name: {key}")
    if not MIN_OCTAVE <= octave <= MAX_OCTAVE:
        raise ValueError(
            f"Octave {octave} out of range {MIN_OCTAVE}-{MAX_OCTAVE}"
        )

    semitone = SEMITONE_MAP[key]
    # MIDI octave numbers are offset by one relative to scientific pitch
    # notation, so C4 lands on 60.
    midi = 12 * (octave + 1) + semitone
    return Note(
        letter=letter,
        accidental=accidental,
        octave=octave,
        semitone=semitone,
        midi=midi,
        frequency=midi_to_frequency(midi),
    )


def parse_tokens(tokens: Sequence[str]) -> ParseResult:
    """Parse raw note tokens into :class:`Note` objects.

    Each token is trimmed and upper-cased before validation.  Invalid tokens
    are skipped and described in the returned ``errors`` list; they never stop
    the remaining tokens from being parsed, so
    ``len(notes) + len(errors) == len(tokens)`` always holds.

    Parameters
    ----------
    tokens:
        Strings such as ``"c4"``, ``"F#3"`` or ``"g"`` (octave defaults to 4).

    Returns
    -------
    ParseResult
        ``(notes, errors)`` with notes in the order of their tokens.
    """

    notes: List[Note] = []
    errors: List[str] = []

    for index, raw_token in enumerate(tokens):
        token = raw_token.strip().upper()

        if token == "":
            errors.append(f"Empty token at position {index}")
            logger.debug("Rejected token %d: empty", index)
            continue

        letter = token[0]
        if letter not in VALID_LETTERS:
            errors.append(f"Invalid note letter '{letter}' in token {index}")
            logger.debug("Rejected token %d (%r): bad letter", index, raw_token)
            continue

        accidental = "#" if token[1:2] == "#" else None
        octave_str = token[2:] if accidental else token[1:]

        if octave_str == "":
            octave = DEFAULT_OCTAVE
        else:
            match = _OCTAVE_RE.match(octave_str)
            octave = int(match.group()) if match else None

        if octave is None or not MIN_OCTAVE <= octave <= MAX_OCTAVE:
            errors.append(f"Invalid octave in token {index}")
            logger.debug("Rejected token %d (%r): bad octave", index, raw_token)
            continue

        key = letter + (accidental or "")
        if key not in SEMITONE_MAP:
            # ``E#`` and ``B#`` have no entry in the table.
            errors.append(f"Unknown note '{key}' at token {index}")
            logger.debug("Rejected token %d (%r): unknown pitch", index, raw_token)
            continue

        notes.append(make_note(letter, accidental, octave))

    return ParseResult(notes, errors)


def tokenize(text: str) -> List[str]:
    """Split free-form user input on whitespace and commas.

    Empty fragments are discarded, so ``"c4, e4  g4"`` yields three tokens.
    """

    return [part for part in re.split(r"[\s,]+", text) if part]


def notes_to_names(notes: Iterable[Note]) -> List[str]:
    """Convert parsed notes back into plain note name strings."""

    return [note.name for note in notes]


def note_to_midi(name: str) -> int:
    """Convert a canonical note name such as ``C#4`` into a MIDI number.

    Only names produced by this package are accepted: an upper-case letter,
    an optional ``#`` and a non-negative octave.

    Raises
    ------
    ValueError
        If ``name`` is malformed or names a pitch outside the parser's range.
    """

    match = _NAME_RE.fullmatch(name)
    if not match:
        raise ValueError(f"Invalid note format: {name}")
    pitch, octave_str = match.groups()
    letter, accidental = pitch[0], (pitch[1:] or None)
    return make_note(letter, accidental, int(octave_str)).midi


def build_frequency_index(notes: Iterable[Note]) -> Dict[str, float]:
    """Map each note name to its frequency.

    Duplicate names overwrite earlier entries, so the last occurrence wins.
    """

    index: Dict[str, float] = {}
    for note in notes:
        index[note.name] = note.frequency
    return index


def get_frequency_for_note(name: str, index: Dict[str, float]) -> Optional[float]:
    """Return the frequency stored for ``name`` or ``None`` when unknown."""

    return index.get(name)
