"""Entry point wrapper for ``python -m melody_chain``.

Execution is forwarded to :func:`melody_chain.main` so ``python -m`` and the
installed ``melody-chain`` console script behave identically.

Example
-------
::

    python -m melody_chain --notes "c4 e4 g4 e4 c4" --mode pattern --length 8
"""

from . import main

if __name__ == "__main__":
    main()
