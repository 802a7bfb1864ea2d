"""Allow running as: python -m precision_engine"""

import sys

from precision_engine.main import main

if __name__ == "__main__":
    sys.exit(main())
