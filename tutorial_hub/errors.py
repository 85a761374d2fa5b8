"""Exceptions raised by the import pipeline and the tutorial store.

Every error carries the HTTP status the API answers with, so route
handlers can let them propagate.
"""

from __future__ import annotations


class TutorialError(Exception):
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidUrl(TutorialError):
    """URL is not a recognised GitHub file or folder URL."""


class FetchFailed(TutorialError):
    """GitHub answered with a non-2xx status."""

    def __init__(self, message: str, status: int):
        super().__init__(message)
        self.status = status


class EmptyContent(TutorialError):
    pass


class NoMarkdownFound(TutorialError):
    pass


class DuplicateUrl(TutorialError):
    status_code = 409


class DuplicateTutorial(TutorialError):
    status_code = 409


class InvalidId(TutorialError):
    pass


class NotFound(TutorialError):
    status_code = 404


class UpstreamError(TutorialError):
    """Network or transport failure talking to GitHub."""

    status_code = 502
