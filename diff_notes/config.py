"""
Configuration model for diff-notes.

The CLI constructs a Config instance and passes it down explicitly so no
module needs to hold a reference to "the current repository".
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .domain import DiffSelector


@dataclass
class Config:
    """
    Top-level configuration for a diff-notes run.

    from_ref/to_ref select a branch comparison; when both are unset the
    local changes are used (the index when use_staged is set, the
    working tree otherwise).
    """

    repo_path: Optional[str] = None
    from_ref: Optional[str] = None
    to_ref: Optional[str] = None
    use_staged: bool = False
    file_path: Optional[str] = None
    verbosity: int = 0

    def selector(self) -> DiffSelector:
        if self.from_ref or self.to_ref:
            return DiffSelector(
                source="branches",
                from_ref=self.from_ref or "HEAD",
                to_ref=self.to_ref or "HEAD",
                path=self.file_path,
            )
        source = "staged" if self.use_staged else "working"
        return DiffSelector(source=source, path=self.file_path)  # type: ignore[arg-type]
