"""Write generated note names to a Standard MIDI File.

Modification summary
--------------------
* ``create_midi_file`` maps the host's oscillator names (``sine``,
  ``square``, ``sawtooth``, ``triangle``) to General MIDI programs so the
  exported file sounds close to the in-app preview.
* Volume on the 0-100 scale is converted to note velocity.
* Imports from ``mido`` are deferred inside ``create_midi_file`` so the module
  can load even when the dependency is missing.

This module only renders files; playing them is left to the user's MIDI
player or DAW.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Dict, Sequence

if TYPE_CHECKING:
    from mido import MidiFile

from .note_utils import note_to_midi

__all__ = ["INSTRUMENT_PROGRAMS", "TICKS_PER_BEAT", "create_midi_file", "volume_to_velocity"]

TICKS_PER_BEAT = 480

# Zero-based General MIDI programs approximating each oscillator shape.
INSTRUMENT_PROGRAMS: Dict[str, int] = {
    "sine": 79,  # Ocarina
    "square": 80,  # Lead 1 (square)
    "sawtooth": 81,  # Lead 2 (sawtooth)
    "triangle": 73,  # Flute
}


def volume_to_velocity(volume: int) -> int:
    """Scale a 0-100 volume to a 0-127 MIDI velocity.

    A ``note_on`` with velocity 0 is a note-off, so a volume of 0 exports a
    silent file. Any positive volume maps to a velocity of at least 1.
    """

    if not 0 <= volume <= 100:
        raise ValueError("volume must be between 0 and 100")
    if volume == 0:
        return 0
    return max(1, round(volume * 127 / 100))


def create_midi_file(
    names: Sequence[str],
    bpm: int,
    output_file: str,
    *,
    volume: int = 80,
    instrument: str = "sine",
    note_beats: float = 1.0,
) -> "MidiFile":
    """Write ``names`` to ``output_file`` as a single-track MIDI file.

    Every note lasts ``note_beats`` beats and notes follow each other without
    gaps, mirroring the fixed-step playback of the host.  The parent directory
    of ``output_file`` is created automatically.

    Returns
    -------
    MidiFile
        In-memory representation of the written file.

    Raises
    ------
    ValueError
        If ``bpm`` or ``note_beats`` is not positive, ``volume`` is outside
        0-100, ``instrument`` is unknown or a name is not a valid note.
    ImportError
        If ``mido`` is not installed.
    """
    try:
        import mido
        from mido import Message, MetaMessage, MidiFile, MidiTrack
    except ModuleNotFoundError as exc:
        raise ImportError(
            "mido is required to create MIDI files; install it with 'pip install mido'"
        ) from exc

    if bpm <= 0:
        raise ValueError("bpm must be a positive integer")
    if note_beats <= 0:
        raise ValueError("note_beats must be positive")
    if instrument not in INSTRUMENT_PROGRAMS:
        raise ValueError(f"Unknown instrument: {instrument}")
    velocity = volume_to_velocity(volume)

    # Convert every name before touching the filesystem so a bad name does not
    # leave a half-written file behind.
    midi_notes = [note_to_midi(name) for name in names]

    mid = MidiFile(ticks_per_beat=TICKS_PER_BEAT)
    track = MidiTrack()
    mid.tracks.append(track)

    track.append(MetaMessage("set_tempo", tempo=mido.bpm2tempo(bpm), time=0))
    track.append(
        Message("program_change", program=INSTRUMENT_PROGRAMS[instrument], time=0)
    )

    duration = int(round(note_beats * TICKS_PER_BEAT))
    for midi_note in midi_notes:
        track.append(Message("note_on", note=midi_note, velocity=velocity, time=0))
        track.append(Message("note_off", note=midi_note, velocity=0, time=duration))

    Path(output_file).parent.mkdir(parents=True, exist_ok=True)
    mid.save(output_file)
    logging.info("MIDI file saved to %s", output_file)
    return mid
