"""Module entry point: python -m ski_tracker ..."""

from ski_tracker.main import main


if __name__ == "__main__":
    raise SystemExit(main())
