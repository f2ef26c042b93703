"""Run the allocator CLI with ``python -m payopt``."""

import sys

from payopt.cli import main

sys.exit(main())
