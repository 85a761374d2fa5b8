"""
tutorial_hub/config.py
──────────────────────────────────────────────────────────────────────────────
Environment configuration. Values come from the process environment or a
local .env file.
"""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# ─── Storage ───────────────────────────────────────────────────────────
DB_PATH    = Path(os.getenv("TUTORIALS_DB", "tutorials.db"))
DB_TIMEOUT = float(os.getenv("DB_TIMEOUT", "5"))       # sqlite busy timeout (sec)

# ─── GitHub ────────────────────────────────────────────────────────────
GITHUB_TOKEN   = os.getenv("GITHUB_TOKEN")  # optional, avoids 60-requests/hour cap
GITHUB_TIMEOUT = float(os.getenv("GITHUB_TIMEOUT", "30"))

# ─── Admin ─────────────────────────────────────────────────────────────
ADMIN_EMAIL    = os.getenv("ADMIN_EMAIL", "admin@example.com")
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "admin123")

DEBUG = bool(int(os.getenv("TUTORIALS_DEBUG", "0")))
