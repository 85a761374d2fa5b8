"""
tutorial_hub/importer.py
──────────────────────────────────────────────────────────────────────────────
Turn a GitHub URL into a stored tutorial.

    …/blob/<branch>/file.md   → one flat tutorial
    …/tree/<branch>/folder    → one tutorial, one chapter per *.md file
"""

from __future__ import annotations

import logging

import requests

from .db import TutorialStore
from .errors import DuplicateTutorial, DuplicateUrl, NoMarkdownFound
from .models import ChapteredTutorial, FlatTutorial, FolderTutorial
from .scraper.github import (
    classify_url,
    fetch_markdown,
    organize_chapters,
    parse_github_url,
    scan_folder,
)
from .scraper.markdown import estimate_read_time, extract_description, humanize_folder_name

log = logging.getLogger(__name__)


def folder_title(url: str) -> str:
    loc = parse_github_url(url)
    name = loc.path.rstrip("/").split("/")[-1] or loc.repo
    return humanize_folder_name(name)


def fetch_folder_tutorial(url: str, session: requests.Session | None = None) -> FolderTutorial:
    """Scan a GitHub folder and shape it into ordered chapters (not stored)."""
    loc = parse_github_url(url)
    scan = scan_folder(url, session)
    if not scan.markdown_files:
        detail = "; ".join(scan.errors)
        raise NoMarkdownFound(
            "No markdown files found in the specified directory"
            + (f" ({detail})" if detail else "")
        )

    chapters = organize_chapters(scan.markdown_files)
    return FolderTutorial(
        title=folder_title(url),
        description=extract_description(chapters[0].content),
        chapters=chapters,
        author=loc.owner,
        total_read_time=sum(ch.read_time or 0 for ch in chapters),
        errors=scan.errors,
    )


def import_tutorial(store: TutorialStore, url: str,
                    session: requests.Session | None = None) -> dict:
    if classify_url(url) == "folder":
        return _import_folder(store, url, session)
    return _import_file(store, url, session)


def _import_file(store: TutorialStore, url: str, session: requests.Session | None) -> dict:
    if store.exists_url(url):
        raise DuplicateUrl("Tutorial with this GitHub URL already exists")

    md = fetch_markdown(url, session)
    tutorial = FlatTutorial(
        title=md.title,
        description=md.description,
        content=md.content,
        github_url=url,
        author=md.author,
        read_time=estimate_read_time(md.content),
    )
    tutorial_id = store.insert(tutorial)
    log.info("Imported %s as %r (%s)", url, tutorial.title, tutorial_id)

    return {
        "message": "Tutorial added successfully",
        "tutorial": {
            "id": tutorial_id,
            "title": tutorial.title,
            "description": tutorial.description,
        },
    }


def _import_folder(store: TutorialStore, url: str, session: requests.Session | None) -> dict:
    result = fetch_folder_tutorial(url, session)

    # folders are matched on title + author, not on URL
    if store.find_one(title=result.title, author=result.author):
        raise DuplicateTutorial(f'Tutorial "{result.title}" already exists')

    tutorial = ChapteredTutorial(
        title=result.title,
        description=result.description,
        chapters=result.chapters,
        github_url=url,
        author=result.author,
        read_time=result.total_read_time,
        total_chapters=len(result.chapters),
    )
    tutorial_id = store.insert(tutorial)
    log.info("Imported %s as %r with %d chapters (%d warnings)",
             url, tutorial.title, len(result.chapters), len(result.errors))

    payload = {
        "message": f'Tutorial "{result.title}" created successfully '
                   f"with {len(result.chapters)} chapters",
        "tutorial": {
            "id": tutorial_id,
            "title": tutorial.title,
            "description": tutorial.description,
            "total_chapters": len(result.chapters),
            "total_read_time": result.total_read_time,
        },
        "chapters": [{"title": ch.title, "read_time": ch.read_time} for ch in result.chapters],
    }
    if result.errors:
        payload["errors"] = result.errors
    return payload
