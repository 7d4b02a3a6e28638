#!/usr/bin/env python3
"""Convenience script for running Melody Chain from a source checkout.

Equivalent to ``python -m melody_chain``; see :mod:`melody_chain.cli` for the
available options.
"""

from melody_chain import main

if __name__ == "__main__":
    main()
