"""Allow `python -m todopro` to run the CLI."""

from todopro.cli.main import main

if __name__ == "__main__":
    main()
