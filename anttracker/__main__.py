"""Entrypoint for `python -m anttracker`."""

from .cli import main


if __name__ == "__main__":
    main()
