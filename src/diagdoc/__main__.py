"""Allow ``python -m diagdoc``."""

import sys

from diagdoc.cli import main

sys.exit(main())
