"""Executable entry point: ``python -m common_ground``."""

from __future__ import annotations

import sys

from common_ground.app import main


if __name__ == "__main__":
    sys.exit(main())
