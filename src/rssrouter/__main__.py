"""Allow ``python -m rssrouter``."""

import sys

from rssrouter.cli import main

sys.exit(main())
