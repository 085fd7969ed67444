"""Convenience shim to build releases.json and ERRORS.md from the command line."""

from __future__ import annotations

import sys

from src.pipeline.runner import main


if __name__ == "__main__":
    main(sys.argv[1:])
