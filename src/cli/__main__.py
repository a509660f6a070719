"""Allow ``python -m src.cli`` execution."""

import sys

from src.cli.tracker import main

sys.exit(main())
