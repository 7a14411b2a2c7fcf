"""Allow ``python -m nforge``."""

import sys

from nforge.launcher import main

sys.exit(main())
