import sys

from sibilant.cli import main

sys.exit(main())
