# File: backend/tests/conftest.py
# Version: v0.2.0
"""
Test bootstrap: put the repo root on sys.path so 'backend.*' imports work
without an editable install (`pip install -e .[test]` works too).
"""
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[2]  # repo root (../.. from this file)
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))
