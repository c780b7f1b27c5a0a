"""Allow ``python -m followback``."""

import sys

from .cli import main

sys.exit(main())
