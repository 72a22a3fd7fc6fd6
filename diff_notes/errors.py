"""
Custom exception types used across diff-notes.

Only a handful of situations are real failures: a comment that would be
stored in a corrupt state, and git invocations that cannot complete.
Everything else in the core degrades to a neutral result instead of
raising.
"""

from __future__ import annotations


class DiffNotesError(Exception):
    """Base class for all diff-notes specific errors."""


class CommentValidationError(DiffNotesError, ValueError):
    """Raised when a comment is rejected at the annotation store boundary."""


class GitError(DiffNotesError):
    """Raised when git operations fail."""
