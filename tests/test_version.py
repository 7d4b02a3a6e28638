"""Simple version check for the package.

Verifies that the ``__version__`` attribute matches the expected release
string."""

import melody_chain


def test_version_matches():
    """Ensure ``melody_chain.__version__`` exposes the release version."""
    assert melody_chain.__version__ == "0.1.0"
