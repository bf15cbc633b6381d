"""Main entry point for the factor_finder package."""
from factor_finder.cli import cli


def main():
    """Main entry point function."""
    cli()


if __name__ == "__main__":
    main()
