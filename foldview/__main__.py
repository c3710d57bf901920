"""Module entrypoint for ``python -m foldview``.

All argument parsing happens in ``foldview.cli``.
"""

from .cli import main


if __name__ == "__main__":
    main()
