"""Run logtally as a module: ``python -m logtally``."""

from logtally.cli import main

if __name__ == "__main__":
    main()
