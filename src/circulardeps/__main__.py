"""Entry point for `python3 -m circulardeps`."""

from circulardeps.cli import app


def main() -> None:
    """CLI entry point for the `circulardeps` script."""
    app()


if __name__ == "__main__":
    main()
