import sys

from tilemerge.cli import main

sys.exit(main())
