"""Allow running the CLI with ``python -m nviz``."""

from nviz.cli import main

if __name__ == "__main__":
    main()
