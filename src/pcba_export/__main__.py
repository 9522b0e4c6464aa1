"""Allow running as ``python -m pcba_export``."""

import sys

from pcba_export.cli import main

sys.exit(main())
