#!/usr/bin/env python3
"""
Minefield - Main entry point.

Usage:
    python main.py serve [--host HOST] [--port N] [--size N] [--mines N] [--timeout S]
    python main.py play [--host HOST] [--port N]
"""
import sys
from pathlib import Path

# Allow running from a source checkout without installing
sys.path.insert(0, str(Path(__file__).parent / "src"))

from minefield.cli import main


if __name__ == "__main__":
    main()
