"""Module entrypoint for ``python -m sourcenav``.

All argument parsing and session setup happen in ``sourcenav.cli``.
"""

from .cli import main


if __name__ == "__main__":
    main()
