"""Allow `python -m chronicle`."""

import sys

from chronicle.main import main


if __name__ == '__main__':
    sys.exit(main())
