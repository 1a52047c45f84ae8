"""Allow running the orchestrator with ``python -m sunshine_build``"""

import sys

from .main import main

if __name__ == "__main__":
    sys.exit(main())
