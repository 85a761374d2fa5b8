"""
tutorial_hub/scraper/markdown.py
───────────────────────────────────────────────────────────────────────────────
Metadata helpers for raw Markdown pulled from GitHub:

• title        – first "# " heading
• description  – first prose line after that heading (≤ 200 chars)
• read time    – whitespace word count at 200 words/minute
• folder title – "intro-to-rust" → "Intro To Rust"
• HTML         – markdown-it-py rendering for the reader endpoints
"""

from __future__ import annotations

import math
import re

from markdown_it import MarkdownIt

DEFAULT_TITLE    = "Untitled Tutorial"
DESCRIPTION_MAX  = 200
WORDS_PER_MINUTE = 200

MD = MarkdownIt().enable(["table", "strikethrough"])

WORD_START_RE = re.compile(r"\b\w")
DIGITS_RE     = re.compile(r"(\d+)")


def extract_title(md_text: str, fallback: str = DEFAULT_TITLE) -> str:
    for line in md_text.split("\n"):
        line = line.strip()
        if line.startswith("# "):
            return line[2:].strip()
    return fallback


def extract_description(md_text: str) -> str:
    """Return the first non-heading line after the level-1 title, or ""."""
    found_title = False
    for line in md_text.split("\n"):
        line = line.strip()
        if line.startswith("# "):
            found_title = True
            continue
        if found_title and line and not line.startswith("#"):
            if len(line) > DESCRIPTION_MAX:
                return line[:DESCRIPTION_MAX] + "..."
            return line
    return ""


def estimate_read_time(md_text: str) -> int:
    words = len(md_text.split())
    return max(1, math.ceil(words / WORDS_PER_MINUTE))


def order_key(title: str) -> int:
    """First run of digits in a chapter title; 999 when there is none."""
    m = DIGITS_RE.search(title)
    return int(m.group(1)) if m else 999


def humanize_folder_name(name: str) -> str:
    return WORD_START_RE.sub(lambda m: m.group(0).upper(), name.replace("-", " "))


def render_html(md_text: str) -> str:
    return MD.render(md_text)
