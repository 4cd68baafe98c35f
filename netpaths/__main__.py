"""Allow ``python -m netpaths``."""

from netpaths.cli import main

if __name__ == "__main__":
    main()
