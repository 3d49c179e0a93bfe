#!/usr/bin/env python3
"""
paths.py
-------------------
Path constants and configuration for the moodjournal project.

All paths are defined relative to the project root and can be overridden
through the CLI options of `journaldb`.

The project structure:
    ROOT/
    ├── moodjournal/   # Package code, migrations and default seeds
    ├── data/          # User data (journal database, exports)
    └── logs/          # Application logs
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from pathlib import Path

# ----- Package & project directories -----
PACKAGE_DIR: Path = Path(__file__).resolve().parent.parent
ROOT: Path = PACKAGE_DIR.parent
DATA_DIR = ROOT / "data"

# --- Database ---
ALEMBIC_DIR = PACKAGE_DIR / "migrations"
DB_DIR = DATA_DIR / "db"
DB_PATH = DB_DIR / "journal.db"

# --- Seeds ---
SEEDS_PATH = PACKAGE_DIR / "seeds" / "defaults.yaml"

# --- Exports ---
EXPORT_DIR = DATA_DIR / "exports"

# ---- Logs ----
LOG_DIR = ROOT / "logs"
