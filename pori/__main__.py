"""Module entrypoint for ``python -m pori``.

This keeps module-mode execution behavior identical to the CLI script.
All argument parsing and runtime setup happen in ``pori.cli``.
"""

from .cli import main


if __name__ == "__main__":
    main()
