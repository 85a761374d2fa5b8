#!/usr/bin/env python
"""
scripts/init_db.py
───────────────────────────────────────────────────────────────────────────────
Create the tutorial tables in TUTORIALS_DB (default: tutorials.db) and seed
one sample tutorial so the site has something to show.

Tables
──────
tutorials   one row per tutorial (flat or chaptered)
chapters    ordered chapters of chaptered tutorials

Usage
─────
    python scripts/init_db.py            # create tables + sample
    python scripts/init_db.py --no-seed  # tables only
"""

from __future__ import annotations
import argparse, sys

from tutorial_hub import config
from tutorial_hub.db import TutorialStore
from tutorial_hub.errors import DuplicateUrl
from tutorial_hub.models import Difficulty, FlatTutorial
from tutorial_hub.scraper.markdown import estimate_read_time, extract_description, extract_title

SAMPLE_URL = "https://github.com/example/first-principles"
SAMPLE_MD = """# Getting Started with First Principles

Learn the fundamental approach to problem-solving that breaks down complex issues into their basic elements.

## What Are First Principles?

First principles thinking is a problem-solving technique that involves breaking
down complex problems into their most basic, foundational elements. Instead of
reasoning by analogy or convention, you start from fundamental truths and build
up your understanding from there.

## How to Apply First Principles

1. **Identify the problem** – clearly define what you're trying to solve.
2. **Break it down** – decompose the problem into its fundamental components.
3. **Examine assumptions** – question everything you think you know.
4. **Rebuild from scratch** – using only verified facts, construct your
   understanding anew.

## Conclusion

First principles thinking takes more effort initially but leads to breakthrough
insights and robust solutions.
"""


# ──────────────────────────────────────────────────────────────────────────────
def seed(store: TutorialStore) -> None:
    sample = FlatTutorial(
        title=extract_title(SAMPLE_MD),
        description=extract_description(SAMPLE_MD),
        content=SAMPLE_MD,
        github_url=SAMPLE_URL,
        author="First Principles Team",
        category="Fundamentals",
        difficulty=Difficulty.BEGINNER,
        read_time=estimate_read_time(SAMPLE_MD),
    )
    try:
        tutorial_id = store.insert(sample)
    except DuplicateUrl:
        print("  • Sample tutorial already present – skipping")
        return
    print(f"  • Inserted sample tutorial {tutorial_id}")


# ──────────────────────────────────────────────────────────────────────────────
def main() -> None:
    parser = argparse.ArgumentParser(description="Create the tutorial database.")
    parser.add_argument("--no-seed", action="store_true", help="skip the sample tutorial")
    args = parser.parse_args()

    store = TutorialStore(config.DB_PATH, timeout=config.DB_TIMEOUT)
    print("📚  Building database …")
    print("→  DB file:", store.path.resolve())
    store.init_schema()

    if not args.no_seed:
        seed(store)

    print("✅  Done – database is ready.")


if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        sys.exit(130)
