"""Allow `python -m tracecompare`."""

import sys

from tracecompare.cli import main

sys.exit(main())
