"""Run the bundled example generator with ``python -m yamlgen``."""

import sys

from .example import main

if __name__ == "__main__":
    sys.exit(main())
