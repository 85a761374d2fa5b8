"""
tutorial_hub/models.py
──────────────────────────────────────────────────────────────────────────────
Pydantic models for stored tutorials plus the transient values passed
between the GitHub scraper and the importer.

A stored tutorial is one of two shapes, tagged by `kind`:

    FlatTutorial       – a single markdown document in `content`
    ChapteredTutorial  – an ordered list of chapters
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field, field_validator


class Difficulty(str, Enum):
    BEGINNER     = "Beginner"
    INTERMEDIATE = "Intermediate"
    ADVANCED     = "Advanced"


# ─── Stored records ────────────────────────────────────────────────────
class Chapter(BaseModel):
    title: str
    content: str
    order: int = Field(ge=1)
    read_time: int | None = Field(default=None, ge=1)

    @field_validator("title")
    @classmethod
    def _strip(cls, v: str) -> str:
        return v.strip()


class _TutorialBase(BaseModel):
    id: str | None = None
    title: str
    description: str | None = None
    github_url: str
    author: str | None = None
    category: str | None = None
    difficulty: Difficulty = Difficulty.BEGINNER
    read_time: int | None = Field(default=None, ge=1)
    total_chapters: int = Field(default=0, ge=0)
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @field_validator("title", "description", "author", "category")
    @classmethod
    def _strip(cls, v: str | None) -> str | None:
        return v.strip() if isinstance(v, str) else v


class FlatTutorial(_TutorialBase):
    kind: Literal["flat"] = "flat"
    content: str | None = None


class ChapteredTutorial(_TutorialBase):
    kind: Literal["chaptered"] = "chaptered"
    chapters: list[Chapter] = Field(default_factory=list)

    def chapter(self, order: int) -> Chapter | None:
        return next((ch for ch in self.chapters if ch.order == order), None)


Tutorial = Annotated[Union[FlatTutorial, ChapteredTutorial], Field(discriminator="kind")]


class TutorialSummary(BaseModel):
    id: str
    title: str
    description: str | None = None
    author: str | None = None
    category: str | None = None
    difficulty: Difficulty = Difficulty.BEGINNER
    read_time: int | None = None
    total_chapters: int = 0
    created_at: datetime


# ─── Scraper values (never stored as-is) ───────────────────────────────
class GitHubFile(BaseModel):
    title: str
    content: str
    author: str | None = None
    description: str | None = None


class FolderScan(BaseModel):
    markdown_files: list[GitHubFile] = Field(default_factory=list)
    total_found: int = 0
    errors: list[str] = Field(default_factory=list)


class FolderTutorial(BaseModel):
    title: str = ""
    description: str | None = None
    chapters: list[Chapter] = Field(default_factory=list)
    author: str | None = None
    total_read_time: int = 0
    errors: list[str] = Field(default_factory=list)
