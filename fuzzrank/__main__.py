"""Allow ``python -m fuzzrank``."""

import sys

from fuzzrank.cli import main

sys.exit(main())
