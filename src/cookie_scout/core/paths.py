"""Bundled data directory resolution."""

from __future__ import annotations

from pathlib import Path

# src/cookie_scout/core/paths.py → src/cookie_scout/data/
DATA_DIR = Path(__file__).resolve().parent.parent / "data"

SIGNATURES_PATH = DATA_DIR / "signatures.yaml"
SCORING_PATH = DATA_DIR / "scoring.yaml"
