"""Shared pytest configuration for the Melody Chain suite."""

import sys
from pathlib import Path

# Ensure the package is importable regardless of the current working directory
sys.path.insert(0, str(Path(__file__).resolve().parents[1]))
