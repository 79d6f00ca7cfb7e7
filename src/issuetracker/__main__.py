"""Allow ``python -m issuetracker``."""

from issuetracker.cli import main

if __name__ == "__main__":
    main()
