"""
Entry point for the mathpath CLI.

Run with:
    python main.py --help
    python main.py path Ada
"""
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent))

from mathpath.cli.main import main

if __name__ == "__main__":
    main()
