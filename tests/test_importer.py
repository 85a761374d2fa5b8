"""Tests for tutorial_hub/importer.py — building and storing imported tutorials."""

import pytest

from tests.fakes.fake_github import FakeGitHub
from tutorial_hub.errors import (
    DuplicateTutorial,
    DuplicateUrl,
    FetchFailed,
    InvalidUrl,
    NoMarkdownFound,
)
from tutorial_hub.importer import fetch_folder_tutorial, folder_title, import_tutorial
from tutorial_hub.models import ChapteredTutorial, FlatTutorial


@pytest.fixture
def course():
    gh = FakeGitHub("octo", "course", "main")
    gh.add_file("docs/1-intro.md", "# 1. Intro\n\nWhy this course exists.\n")
    gh.add_file("docs/3-advanced.md", "# 3. Advanced\n\nHard parts.\n")
    gh.add_file("docs/2-middle.md", "# 2. Middle\n\nThe bulk.\n")
    return gh


class TestFolderTitle:
    def test_last_path_segment(self):
        assert folder_title("https://github.com/o/r/tree/main/guides/intro-to-rust") == "Intro To Rust"

    def test_trailing_slash(self):
        assert folder_title("https://github.com/o/r/tree/main/docs/") == "Docs"


class TestFetchFolderTutorial:
    def test_chapters_follow_title_numbers(self, course):
        result = fetch_folder_tutorial(course.tree_url("docs"), course.session())
        assert [(c.order, c.title) for c in result.chapters] == [
            (1, "1. Intro"), (2, "2. Middle"), (3, "3. Advanced"),
        ]
        assert result.title == "Docs"
        assert result.author == "octo"
        assert result.description == "Why this course exists."
        assert result.total_read_time == 3
        assert result.errors == []

    def test_only_failures(self):
        gh = FakeGitHub()
        gh.add_file("docs/a.md", status=404)
        with pytest.raises(NoMarkdownFound, match="a.md"):
            fetch_folder_tutorial(gh.tree_url("docs"), gh.session())


class TestImportFile:
    def test_creates_flat_tutorial(self, store):
        gh = FakeGitHub()
        gh.add_file("hello.md", "# Hello\n\nWorld")
        url = gh.blob_url("hello.md")

        payload = import_tutorial(store, url, gh.session())

        assert payload["message"] == "Tutorial added successfully"
        assert payload["tutorial"]["title"] == "Hello"
        assert payload["tutorial"]["description"] == "World"
        stored = store.get(payload["tutorial"]["id"])
        assert isinstance(stored, FlatTutorial)
        assert stored.content == "# Hello\n\nWorld"
        assert stored.read_time == 1
        assert stored.author == "octo"
        assert stored.github_url == url

    def test_duplicate_url_is_rejected_before_fetching(self, store):
        gh = FakeGitHub()
        gh.add_file("hello.md", "# Hello")
        url = gh.blob_url("hello.md")
        import_tutorial(store, url, gh.session())

        session = gh.session()
        with pytest.raises(DuplicateUrl):
            import_tutorial(store, url, session)
        assert session.calls == []

    def test_fetch_error_propagates(self, store):
        gh = FakeGitHub()
        with pytest.raises(FetchFailed):
            import_tutorial(store, gh.blob_url("gone.md"), gh.session())
        assert store.list_summaries() == []

    def test_unrecognised_url(self, store):
        with pytest.raises(InvalidUrl):
            import_tutorial(store, "https://github.com/octo/course")


class TestImportFolder:
    def test_creates_chaptered_tutorial(self, store, course):
        url = course.tree_url("docs")
        payload = import_tutorial(store, url, course.session())

        assert payload["message"] == 'Tutorial "Docs" created successfully with 3 chapters'
        assert payload["tutorial"]["total_chapters"] == 3
        assert payload["tutorial"]["total_read_time"] == 3
        assert [c["title"] for c in payload["chapters"]] == ["1. Intro", "2. Middle", "3. Advanced"]
        assert "errors" not in payload

        stored = store.get(payload["tutorial"]["id"])
        assert isinstance(stored, ChapteredTutorial)
        assert [c.order for c in stored.chapters] == [1, 2, 3]
        assert stored.total_chapters == 3
        assert stored.read_time == 3
        assert stored.github_url == url

    def test_warnings_for_broken_file(self, store):
        gh = FakeGitHub()
        for i in range(1, 5):
            gh.add_file(f"guide/{i}-part.md", f"# Part {i}\n\ntext")
        gh.add_file("guide/5-broken.md", status=500)

        payload = import_tutorial(store, gh.tree_url("guide"), gh.session())

        assert payload["tutorial"]["total_chapters"] == 4
        assert len(payload["errors"]) == 1
        assert "/5-broken.md" in payload["errors"][0]

    def test_duplicate_title_and_author(self, store, course):
        import_tutorial(store, course.tree_url("docs"), course.session())

        other = FakeGitHub("octo", "another-repo", "main")
        other.add_file("docs/a.md", "# A")
        with pytest.raises(DuplicateTutorial, match='"Docs"'):
            import_tutorial(store, other.tree_url("docs"), other.session())

    def test_same_folder_name_other_author_is_allowed(self, store, course):
        import_tutorial(store, course.tree_url("docs"), course.session())

        other = FakeGitHub("someone-else", "course", "main")
        other.add_file("docs/a.md", "# A")
        payload = import_tutorial(store, other.tree_url("docs"), other.session())
        assert payload["tutorial"]["title"] == "Docs"

    def test_empty_folder(self, store):
        gh = FakeGitHub()
        gh.add_dir("docs")
        with pytest.raises(NoMarkdownFound):
            import_tutorial(store, gh.tree_url("docs"), gh.session())
