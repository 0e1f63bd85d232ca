#!/usr/bin/env python3
"""PaceLab — entry point.

Run with:
    python main.py
    python -m pacelab
"""

from pacelab.__main__ import main


if __name__ == "__main__":
    main()
