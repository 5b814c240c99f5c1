"""Make unitary_defect importable from a source checkout (no pip install needed)."""

import sys
from pathlib import Path

SRC_ROOT = Path(__file__).resolve().parent

if str(SRC_ROOT) not in sys.path:
    sys.path.insert(0, str(SRC_ROOT))
