"""Allow ``python -m pylsfd``."""

import sys

from pylsfd.cli import main

sys.exit(main())
