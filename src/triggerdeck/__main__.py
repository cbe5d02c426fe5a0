"""Allow ``python -m triggerdeck``."""

from triggerdeck.cli.main import cli

if __name__ == "__main__":
    cli()
