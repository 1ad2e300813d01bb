"""Module entrypoint for ``python -m threadviewer``."""

from .cli import main


if __name__ == "__main__":
    main()
