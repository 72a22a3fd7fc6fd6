"""
Git integration for diff-notes.

This module is the only place that talks to the git CLI. It returns raw
unified diff text and per-file change statistics; interpreting that text
is left to the parser.
"""

from __future__ import annotations

import logging
import subprocess
from typing import List, Optional

from .domain import DiffSelector, FileChangeStats
from .errors import GitError

LOG = logging.getLogger(__name__)


def _run_git(
    args: list[str],
    cwd: Optional[str] = None,
) -> subprocess.CompletedProcess[str]:
    """
    Run a git command and return the completed process.

    All git invocations go through here so error handling and logging
    are centralized.
    """

    cmd = ["git", *args]
    LOG.debug("Running git command: %s", " ".join(cmd))
    try:
        completed = subprocess.run(
            cmd,
            cwd=cwd,
            check=False,
            text=True,
            capture_output=True,
        )
    except OSError as exc:
        raise GitError(f"failed to execute git: {exc}") from exc

    if completed.returncode != 0:
        stderr = (completed.stderr or "").strip()
        LOG.debug("git stderr: %s", stderr)
        message = f"git command failed: {' '.join(cmd)}"
        if stderr:
            message = f"{message}: {stderr}"
        raise GitError(message)

    return completed


def _diff_args(selector: DiffSelector) -> list[str]:
    if selector.source == "branches":
        if not selector.from_ref or not selector.to_ref:
            raise GitError("a branch comparison needs both a from and a to ref")
        args = ["diff", selector.from_ref, selector.to_ref]
    elif selector.source == "staged":
        args = ["diff", "--cached"]
    else:
        args = ["diff"]
    return args


def _with_path(args: list[str], selector: DiffSelector) -> list[str]:
    # Paths are repository-relative and must not be read as globs.
    if selector.path:
        return [*args, "--", f":(top,literal){selector.path}"]
    return args


def ensure_repository(path: str) -> str:
    """
    Return the top-level directory of the repository containing path.
    """

    try:
        return _run_git(["rev-parse", "--show-toplevel"], cwd=path).stdout.strip()
    except GitError as exc:
        raise GitError(f"{path} is not a git repository") from exc


def list_branches(cwd: Optional[str] = None) -> List[str]:
    output = _run_git(["branch", "--all", "--format=%(refname:short)"], cwd=cwd).stdout
    return [line.strip() for line in output.splitlines() if line.strip()]


def get_diff_text(selector: DiffSelector, cwd: Optional[str] = None) -> str:
    """
    Return unified diff text for selector.

    The result is an empty string when there is no difference.
    """

    args = _with_path(_diff_args(selector), selector)
    return _run_git(args, cwd=cwd).stdout


def get_change_stats(selector: DiffSelector, cwd: Optional[str] = None) -> List[FileChangeStats]:
    """
    Return per-file insertion/deletion counts for selector.

    Output is read in -z form so paths arrive unquoted, exactly as git
    stores them. Binary files report "-" for both counts; they are
    listed with zero changes. A rename record ("a\\td\\t" followed by the
    old and new paths as separate fields) is listed under its new path.
    """

    args = _diff_args(selector)
    args = _with_path([*args[:1], "--numstat", "-z", "--no-renames", *args[1:]], selector)
    output = _run_git(args, cwd=cwd).stdout

    fields = output.split("\0")
    stats: List[FileChangeStats] = []
    i = 0
    while i < len(fields):
        record = fields[i]
        i += 1
        if not record:
            continue
        parts = record.split("\t", 2)
        if len(parts) != 3:
            LOG.debug("Skipping unexpected numstat record: %r", record)
            continue
        added, deleted, path = parts
        if not path:
            # Rename: old path, then new path.
            path = fields[i + 1] if i + 1 < len(fields) else ""
            i += 2
        if not path:
            continue
        stats.append(
            FileChangeStats(
                path=path,
                insertions=int(added) if added.isdigit() else 0,
                deletions=int(deleted) if deleted.isdigit() else 0,
            )
        )
    return stats
