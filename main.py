"""Run sibilant from a checkout without installing it.

Hotkey launchers can point straight at this file::

    python /path/to/sibilant/main.py translate --output alfred
"""

import sys

from sibilant.cli import main


if __name__ == "__main__":
    sys.exit(main())
