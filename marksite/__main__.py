"""Entry point for the marksite CLI when run as `python -m marksite`."""

from .cli import main

if __name__ == "__main__":  # pragma: no cover
    main()
