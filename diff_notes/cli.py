"""
Command-line interface for diff-notes.

This module parses arguments, lists branches and changed files, loads
diff texts through the git adapter into a Workspace and prints parsed
diffs, search results or exported comments.
"""

from __future__ import annotations

import argparse
import logging
import os
import re
import sys
from dataclasses import dataclass, replace
from typing import Dict, List, Optional, TextIO, Tuple

from .config import Config
from .domain import DiffLine, DiffSelector, FileChangeStats, LineRange
from .errors import DiffNotesError
from .export import LocalFileDiff
from .git_adapter import ensure_repository, get_change_stats, get_diff_text, list_branches
from .logging_utils import configure_logging
from .views import Workspace

LOG = logging.getLogger(__name__)

_COMMENT_OPTION_RE = re.compile(r"^(?P<file>.+?):(?P<start>\d+)(?:-(?P<end>\d+))?:(?P<text>.*)$", re.S)


@dataclass
class CommentOption:
    """A comment given on the command line; lines are 1-based there."""

    file: str
    start: int
    end: int
    text: str

    @property
    def line_range(self) -> LineRange:
        return LineRange(self.start - 1, self.end - 1)


def parse_comment_option(value: str) -> CommentOption:
    match = _COMMENT_OPTION_RE.match(value)
    if not match:
        raise argparse.ArgumentTypeError(
            f"invalid comment {value!r}; expected FILE:START[-END]:TEXT"
        )
    start = int(match.group("start"))
    end = int(match.group("end")) if match.group("end") else start
    if start < 1:
        raise argparse.ArgumentTypeError("comment lines are 1-based")
    return CommentOption(file=match.group("file"), start=start, end=end, text=match.group("text"))


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="diff-notes",
        description=(
            "Browse, search and annotate git diffs from a branch comparison "
            "or from uncommitted local changes."
        ),
    )

    repo = argparse.ArgumentParser(add_help=False)
    repo.add_argument(
        "-C",
        "--repo",
        dest="repo_path",
        default=None,
        help="Repository to read diffs from (default: current directory).",
    )
    repo.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase verbosity (can be specified multiple times).",
    )

    source = argparse.ArgumentParser(add_help=False)
    source.add_argument("--from", dest="from_ref", help="Base ref of a branch comparison.")
    source.add_argument("--to", dest="to_ref", help="Target ref of a branch comparison.")
    source.add_argument(
        "--staged",
        action="store_true",
        help="Only use staged changes (ignored for branch comparisons).",
    )
    source.add_argument(
        "--file",
        dest="file_path",
        help="Limit the diff to a single path, relative to the -C directory.",
    )

    commands = parser.add_subparsers(dest="command", required=True)

    commands.add_parser("branches", parents=[repo], help="List local and remote branches.")
    commands.add_parser(
        "files",
        parents=[repo, source],
        help="List changed files with their insertion and deletion counts.",
    )
    commands.add_parser(
        "show", parents=[repo, source], help="Print diffs with old/new line numbers."
    )

    search = commands.add_parser("search", parents=[repo, source], help="Search across all diffs.")
    search.add_argument("term", help="Case-insensitive text to look for.")

    export = commands.add_parser(
        "export",
        parents=[repo, source],
        help="Attach comments to diff lines and print them for copying.",
    )
    export.add_argument(
        "-c",
        "--comment",
        dest="comments",
        action="append",
        type=parse_comment_option,
        default=[],
        metavar="FILE:START[-END]:TEXT",
        help="Comment on lines START..END of FILE's diff (repeatable).",
    )

    return parser


def repo_relative_path(file_path: str, base: str, top: str) -> str:
    """
    Turn a path given relative to base into a path relative to the
    repository top level, which is how git reports changed files.
    """

    absolute = os.path.abspath(os.path.join(base, file_path))
    # Resolve symlinked directories but not the file itself.
    absolute = os.path.join(
        os.path.realpath(os.path.dirname(absolute)), os.path.basename(absolute)
    )
    relative = os.path.relpath(absolute, os.path.realpath(top))
    if relative == os.pardir or relative.startswith(os.pardir + os.sep):
        raise DiffNotesError(f"{file_path} is outside the repository {top}")
    return relative.replace(os.sep, "/")


def open_repository(config: Config) -> Tuple[str, Config]:
    """
    Locate the repository top level and return a config whose file_path
    is relative to it.
    """

    base = config.repo_path or "."
    top = ensure_repository(base)
    if config.file_path:
        config = replace(config, file_path=repo_relative_path(config.file_path, base, top))
    return top, config


def _local_selectors(config: Config) -> Tuple[DiffSelector, DiffSelector]:
    working = Config(file_path=config.file_path).selector()
    staged = Config(file_path=config.file_path, use_staged=True).selector()
    return working, staged


def load_workspace(config: Config) -> Workspace:
    """
    Read every changed file's diff text into a Workspace.
    """

    cwd, config = open_repository(config)
    selector = config.selector()

    if selector.source == "branches":
        file_diffs: Dict[str, str] = {}
        for stats in get_change_stats(selector, cwd=cwd):
            file_diffs[stats.path] = get_diff_text(selector.for_path(stats.path), cwd=cwd)
        LOG.info("Loaded %d files from %s..%s", len(file_diffs), selector.from_ref, selector.to_ref)
        return Workspace.from_file_diffs(file_diffs)

    working, staged = _local_selectors(config)

    paths: List[str] = []
    for stats in [*get_change_stats(working, cwd=cwd), *get_change_stats(staged, cwd=cwd)]:
        if stats.path not in paths:
            paths.append(stats.path)

    local: Dict[str, LocalFileDiff] = {}
    for path in paths:
        local[path] = LocalFileDiff(
            working=get_diff_text(working.for_path(path), cwd=cwd),
            staged=get_diff_text(staged.for_path(path), cwd=cwd),
        )
    LOG.info("Loaded local changes for %d files", len(local))
    return Workspace.from_local_changes(local, staged_only=config.use_staged)


def branches(config: Config, out: TextIO) -> None:
    cwd, _ = open_repository(config)
    for name in list_branches(cwd=cwd):
        print(name, file=out)


def _print_stats(stats: List[FileChangeStats], out: TextIO) -> None:
    for entry in stats:
        print(f"+{entry.insertions} -{entry.deletions}\t{entry.path}", file=out)
    insertions = sum(entry.insertions for entry in stats)
    deletions = sum(entry.deletions for entry in stats)
    noun = "file" if len(stats) == 1 else "files"
    print(f"{len(stats)} {noun} changed, +{insertions} -{deletions}", file=out)


def files(config: Config, out: TextIO) -> None:
    cwd, config = open_repository(config)
    selector = config.selector()

    if selector.source == "branches":
        print(f"== {selector.from_ref}..{selector.to_ref}", file=out)
        _print_stats(get_change_stats(selector, cwd=cwd), out)
        return

    working, staged = _local_selectors(config)
    if not config.use_staged:
        print("== working", file=out)
        _print_stats(get_change_stats(working, cwd=cwd), out)
    print("== staged", file=out)
    _print_stats(get_change_stats(staged, cwd=cwd), out)


def _format_row(line: DiffLine) -> str:
    if line.kind == "hunk":
        return line.content
    old = "" if line.old_lineno is None else str(line.old_lineno)
    new = "" if line.new_lineno is None else str(line.new_lineno)
    return f"{old:>5} {new:>5} {line.prefix}{line.content}"


def show(workspace: Workspace, out: TextIO) -> None:
    for view in workspace.views:
        print(f"== {view.name}", file=out)
        for line in view.lines:
            print(_format_row(line), file=out)


def search(workspace: Workspace, term: str, out: TextIO) -> int:
    results = workspace.search(term)
    if not results:
        print(f'No results found for "{term}"', file=out)
        return 0
    for result in results:
        print(f"{result.file_name}:{result.line_index + 1}: {result.content.strip()}", file=out)
    print(workspace.search_index.status(), file=out)
    return len(results)


def export(workspace: Workspace, comments: List[CommentOption], out: TextIO) -> None:
    for option in comments:
        try:
            view = workspace.view(option.file)
        except KeyError:
            raise DiffNotesError(f"no diff loaded for {option.file}") from None
        view.add_comment(option.line_range, option.text)

    text = workspace.export()
    print(text if text is not None else "No comments to export", file=out)


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(argv)

    config = Config(
        repo_path=args.repo_path,
        from_ref=getattr(args, "from_ref", None),
        to_ref=getattr(args, "to_ref", None),
        use_staged=getattr(args, "staged", False),
        file_path=getattr(args, "file_path", None),
        verbosity=args.verbose,
    )

    configure_logging(verbosity=config.verbosity)

    try:
        if args.command == "branches":
            branches(config, sys.stdout)
        elif args.command == "files":
            files(config, sys.stdout)
        else:
            workspace = load_workspace(config)
            if args.command == "show":
                show(workspace, sys.stdout)
            elif args.command == "search":
                search(workspace, args.term, sys.stdout)
            else:
                export(workspace, args.comments, sys.stdout)
    except KeyboardInterrupt:
        return 130
    except DiffNotesError as exc:
        print(f"diff-notes: error: {exc}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":  # pragma: no cover - manual invocation
    raise SystemExit(main())
