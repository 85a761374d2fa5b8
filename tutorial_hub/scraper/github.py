"""
tutorial_hub/scraper/github.py
───────────────────────────────────────────────────────────────────────────────
Pull Markdown tutorials out of GitHub.

• Single files are read from raw.githubusercontent.com (blob URL rewritten)
• Folders are walked through the REST contents API, depth first, one
  request at a time; every *.md file becomes a chapter candidate
• A broken file or sub-directory is reported in `errors` and the walk goes
  on, so a folder with one bad page still imports the rest
"""

from __future__ import annotations

import logging
import re
from pathlib import PurePosixPath
from typing import Iterator, Literal, NamedTuple

import requests

from .. import config
from ..errors import (
    EmptyContent,
    FetchFailed,
    InvalidUrl,
    NoMarkdownFound,
    TutorialError,
    UpstreamError,
)
from ..models import Chapter, FolderScan, GitHubFile
from .markdown import estimate_read_time, extract_description, extract_title, order_key

log = logging.getLogger(__name__)

# ───────────────────────── Config ─────────────────────────────────────────────
API      = "https://api.github.com"
RAW_HOST = "raw.githubusercontent.com"

TREE_RE  = re.compile(r"^https://github\.com/([^/]+)/([^/]+)/tree/([^/]+)/(.+)$")
OWNER_RE = re.compile(r"github\.com/([^/]+)/([^/]+)")


class GitHubLocation(NamedTuple):
    owner: str
    repo: str
    branch: str
    path: str


# ──────────────────────── URL helpers ─────────────────────────────────────────
def classify_url(url: str) -> Literal["folder", "file"]:
    if "/tree/" in url:
        return "folder"
    if "/blob/" in url:
        return "file"
    raise InvalidUrl("Invalid GitHub URL. Please provide a GitHub file or folder URL.")


def parse_github_url(url: str) -> GitHubLocation:
    m = TREE_RE.match(url)
    if not m:
        raise InvalidUrl("Invalid GitHub tree URL format")
    return GitHubLocation(*m.groups())


def to_raw_url(url: str) -> str:
    if "github.com" in url and "/blob/" in url:
        return url.replace("github.com", RAW_HOST, 1).replace("/blob/", "/", 1)
    if RAW_HOST in url:
        return url
    raise InvalidUrl("Invalid GitHub URL format")


def to_api_url(url: str) -> str:
    loc = parse_github_url(url)
    return f"{API}/repos/{loc.owner}/{loc.repo}/contents/{loc.path}?ref={loc.branch}"


def owner_of(url: str) -> str | None:
    m = OWNER_RE.search(url)
    return m.group(1) if m else None


def _subdir_url(dir_url: str, name: str) -> str:
    base, sep, query = dir_url.partition("?")
    return f"{base}/{name}{sep}{query}"


# ──────────────────────── HTTP ────────────────────────────────────────────────
def new_session() -> requests.Session:
    sess = requests.Session()
    sess.headers.update({
        "Accept":     "application/vnd.github+json, text/plain, */*",
        "User-Agent": "tutorial-hub/0.1",
    })
    if config.GITHUB_TOKEN:
        sess.headers["Authorization"] = f"Bearer {config.GITHUB_TOKEN}"
    return sess


def _get(session: requests.Session, url: str, what: str) -> requests.Response:
    log.debug("GET %s", url)
    try:
        resp = session.get(url, timeout=config.GITHUB_TIMEOUT)
    except requests.RequestException as e:
        raise UpstreamError(f"Failed to fetch {what}: {e}") from e
    if not resp.ok:
        raise FetchFailed(f"Failed to fetch {what}: {resp.status_code} {resp.reason}", resp.status_code)
    return resp


def _get_text(session: requests.Session, url: str, what: str) -> str:
    text = _get(session, url, what).text
    if not text.strip():
        raise EmptyContent(f"The markdown file {what} appears to be empty")
    return text


def list_directory(session: requests.Session, api_url: str) -> list[dict]:
    resp = _get(session, api_url, "directory")
    try:
        entries = resp.json()
    except ValueError as e:
        raise UpstreamError(f"Unexpected directory listing from GitHub: {e}") from e
    if not isinstance(entries, list):
        raise UpstreamError("Expected a directory listing but GitHub returned a single entry")
    return entries


# ──────────────────────── Fetchers ────────────────────────────────────────────
def fetch_markdown(url: str, session: requests.Session | None = None) -> GitHubFile:
    """Fetch one Markdown file given its blob (or raw) URL."""
    raw_url = to_raw_url(url)
    content = _get_text(session or new_session(), raw_url, "markdown")
    return GitHubFile(
        title=extract_title(content),
        content=content,
        author=owner_of(url),
        description=extract_description(content),
    )


def _fetch_entry(session: requests.Session, entry: dict, owner: str) -> GitHubFile:
    name = entry["name"]
    content = _get_text(session, entry.get("download_url") or "", name)
    return GitHubFile(
        title=extract_title(content, fallback=PurePosixPath(name).stem),
        content=content,
        author=owner,
        description=extract_description(content),
    )


def scan_folder(url: str, session: requests.Session | None = None) -> FolderScan:
    """Collect every *.md file below a GitHub tree URL.

    The walk keeps a stack of open directory listings instead of recursing,
    so a sub-directory is finished before its parent's later entries, which
    is the order the listing presents them in.
    """
    loc = parse_github_url(url)
    session = session or new_session()
    result = FolderScan()
    stack: list[tuple[str, str, Iterator[dict]]] = []

    def open_dir(dir_url: str, rel_path: str) -> None:
        try:
            entries = list_directory(session, dir_url)
        except TutorialError as e:
            result.errors.append(f"Directory {rel_path}: {e.message}")
            return
        stack.append((dir_url, rel_path, iter(entries)))

    open_dir(to_api_url(url), "")
    while stack:
        dir_url, rel_path, entries = stack[-1]
        entry = next(entries, None)
        if entry is None:
            stack.pop()
            continue

        name = entry.get("name", "")
        if entry.get("type") == "file" and name.endswith(".md"):
            try:
                md_file = _fetch_entry(session, entry, loc.owner)
            except TutorialError as e:
                result.errors.append(f"{rel_path}/{name}: {e.message}")
                continue
            result.markdown_files.append(md_file)
            result.total_found += 1
        elif entry.get("type") == "dir":
            open_dir(_subdir_url(dir_url, name), f"{rel_path}/{name}")

    log.info("Scanned %s: %d markdown files, %d errors",
             url, result.total_found, len(result.errors))

    if not result.markdown_files and not result.errors:
        raise NoMarkdownFound("No markdown files found in the specified directory")
    return result


# ──────────────────────── Chapters ────────────────────────────────────────────
def organize_chapters(files: list[GitHubFile]) -> list[Chapter]:
    """Sort by the number in each title (stable) and number them 1..N."""
    ordered = sorted(files, key=lambda f: order_key(f.title))
    return [
        Chapter(
            title=f.title,
            content=f.content,
            order=i,
            read_time=estimate_read_time(f.content),
        )
        for i, f in enumerate(ordered, 1)
    ]
