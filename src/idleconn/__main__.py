"""src/idleconn/__main__.py

Allows ``python -m idleconn``.
"""

import sys

from idleconn.cli import main

sys.exit(main())
