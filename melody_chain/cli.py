"""Command line helpers for Melody Chain.

This module implements the console entry point for the project.
:func:`run_cli` parses command line arguments, reads the training notes,
generates a melody and optionally renders it to MIDI while :func:`main`
configures logging first.

Options omitted on the command line fall back to the JSON settings file
(``--settings-file`` or :data:`melody_chain.settings.DEFAULT_SETTINGS_FILE`)
and then to the defaults of :class:`~melody_chain.settings.MelodySettings`.

Example
-------
Running ``python -m melody_chain --notes "c4 e4 g4 c4 e4 g4" --mode pattern
--length 16 --seed 7 --output out.mid`` prints sixteen note names learned
from the C major arpeggio and writes them to ``out.mid``.  When ``--notes``
is omitted or ``-`` the tokens are read from standard input.
"""

from __future__ import annotations

import argparse
import logging
import random
import sys
from pathlib import Path
from typing import List, Optional, Sequence

from .generators import GENERATION_MODES, generate_melody_by_mode
from .note_utils import build_frequency_index, parse_tokens, tokenize
from .settings import DEFAULT_SETTINGS_FILE, INSTRUMENTS, MelodySettings, load_settings

__all__ = ["build_parser", "run_cli", "main"]


def build_parser() -> argparse.ArgumentParser:
    """Return the argument parser used by :func:`run_cli`."""

    parser = argparse.ArgumentParser(
        description="Generate a melody from example notes using a Markov chain."
    )
    parser.add_argument("--notes", type=str, help="Training notes such as 'c4 e4 g4'. Reads stdin when omitted or '-'.")
    parser.add_argument("--mode", choices=GENERATION_MODES, help="Generation strategy (default from settings: default).")
    parser.add_argument("--length", type=int, help="Number of notes to generate.")
    parser.add_argument("--order", type=int, help="Markov order used by the pattern mode.")
    parser.add_argument("--seed", type=int, help="Random seed for reproducible output")
    parser.add_argument("--output", type=str, help="Write the generated melody to this MIDI file.")
    parser.add_argument("--bpm", type=int, help="Tempo of the MIDI file in beats per minute.")
    parser.add_argument("--volume", type=int, help="Note volume from 0 to 100.")
    parser.add_argument("--instrument", choices=INSTRUMENTS, help="Instrument used for the MIDI file.")
    parser.add_argument("--frequencies", action="store_true", help="Print the frequency of each training note.")
    parser.add_argument("--settings-file", type=str, help="Path to a JSON settings file")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return parser


def _resolve_settings(args: argparse.Namespace) -> MelodySettings:
    """Merge the settings file with explicit command line options."""

    path = Path(args.settings_file).expanduser() if args.settings_file else DEFAULT_SETTINGS_FILE
    settings = MelodySettings.from_dict(load_settings(path))
    overrides = {
        "tempo": args.bpm,
        "volume": args.volume,
        "instrument": args.instrument,
        "mode": args.mode,
        "length": args.length,
        "order": args.order,
    }
    for name, value in overrides.items():
        if value is not None:
            setattr(settings, name, value)
    return settings


def _read_tokens(notes: Optional[str]) -> List[str]:
    if notes is None or notes == "-":
        return tokenize(sys.stdin.read())
    return tokenize(notes)


def run_cli(argv: Optional[Sequence[str]] = None) -> List[str]:
    """Parse CLI arguments, generate a melody and print it.

    Parse errors for individual tokens are logged as warnings and the valid
    notes are still used.  Invalid options, an empty training set and MIDI
    write failures are logged and terminate with exit status ``1``.

    Returns
    -------
    List[str]
        The generated note names, also printed space-separated on stdout.
    """

    args = build_parser().parse_args(argv)
    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    settings = _resolve_settings(args)
    try:
        settings.validate()
    except ValueError as exc:
        logging.error(str(exc))
        sys.exit(1)

    notes, errors = parse_tokens(_read_tokens(args.notes))
    for message in errors:
        logging.warning(message)
    if not notes:
        logging.error("No valid notes to learn from.")
        sys.exit(1)

    if args.frequencies:
        for name, freq in build_frequency_index(notes).items():
            print(f"{name}\t{freq:.2f}")

    rng = random.Random(args.seed)
    melody = generate_melody_by_mode(
        settings.mode, notes, settings.length, settings.order, rng
    )
    if not melody:
        logging.warning("Generation produced no notes.")
    print(" ".join(melody))

    if args.output:
        from .midi_io import create_midi_file

        try:
            create_midi_file(
                melody,
                settings.tempo,
                args.output,
                volume=settings.volume,
                instrument=settings.instrument,
            )
        except OSError as exc:
            logging.error("Could not write MIDI file: %s", exc)
            sys.exit(1)

    logging.info("Melody generation complete.")
    return melody


def main() -> None:
    """Configure logging and run the CLI."""

    logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")
    run_cli()
