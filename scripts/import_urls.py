#!/usr/bin/env python
"""
scripts/import_urls.py
───────────────────────────────────────────────────────────────────────────────
Import every GitHub URL listed in a text file (one per line, # comments
allowed) into the tutorial database.

• File URLs (…/blob/…) become flat tutorials
• Folder URLs (…/tree/…) become chaptered tutorials
• Failures are reported at the end; they do not stop the batch

Usage
─────
    python scripts/import_urls.py urls.txt
"""

from __future__ import annotations
import argparse, pathlib, sys

import tqdm

from tutorial_hub import config
from tutorial_hub.db import TutorialStore
from tutorial_hub.errors import TutorialError
from tutorial_hub.importer import import_tutorial


def read_urls(path: pathlib.Path) -> list[str]:
    lines = (line.strip() for line in path.read_text(encoding="utf-8").splitlines())
    return [line for line in lines if line and not line.startswith("#")]


# ──────────────────────── Main ────────────────────────────────────────────────
def main() -> int:
    parser = argparse.ArgumentParser(description="Bulk-import GitHub tutorials.")
    parser.add_argument("url_file", type=pathlib.Path)
    args = parser.parse_args()

    store = TutorialStore(config.DB_PATH, timeout=config.DB_TIMEOUT)
    store.init_schema()

    urls = read_urls(args.url_file)
    print(f"➡️   {len(urls)} URLs to import")

    imported, failed, warnings = 0, [], []
    for url in tqdm.tqdm(urls, desc="Importing", unit="url"):
        try:
            result = import_tutorial(store, url)
        except TutorialError as e:
            failed.append(f"{url}: {e.message}")
            continue
        imported += 1
        warnings += result.get("errors", [])

    for line in warnings:
        print("⚠️ ", line)
    for line in failed:
        print("❌ ", line)
    print(f"\n✅  Imported {imported}/{len(urls)} tutorials → {store.path.resolve()}")
    return 1 if failed else 0


if __name__ == "__main__":
    sys.exit(main())
