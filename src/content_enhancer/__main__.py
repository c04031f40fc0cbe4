"""Allow ``python -m content_enhancer <batch.json>``."""

import sys

from content_enhancer.cli import main

if __name__ == "__main__":
    sys.exit(main())
