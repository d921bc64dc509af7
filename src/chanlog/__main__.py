"""Allow running chanlog as ``python -m chanlog``."""

import sys

from chanlog.cli import main

sys.exit(main())
