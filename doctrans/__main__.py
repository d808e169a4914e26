"""Allow running as ``python -m doctrans``."""

import sys

from .cli import main

sys.exit(main())
