"""Landmark fitting runner."""
import sys

from facefit.cli import main

if __name__ == "__main__":
    sys.exit(main())
