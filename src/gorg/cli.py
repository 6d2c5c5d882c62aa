"""Command-line entrypoint."""

from __future__ import annotations

import argparse
import logging
import os
import subprocess
import sys
from collections.abc import Callable, Iterator
from pathlib import Path

from gorg.config import CliOverrides, Config, load_effective_config
from gorg.finder import find_interactive
from gorg.git import GitCommand, GitCommandError, RemoteUrlError, url_from_parts, url_to_path
from gorg.index import (
    IndexIOError,
    InvalidRecordError,
    RepoIndex,
    discover_repositories,
)
from gorg.logging import JsonlAuditLogger, build_event, configure_logging
from gorg.prompt import Key, PromptSession, RawTerminal, TerminalError, read_keys

LOGGER = logging.getLogger(__name__)

Handler = Callable[[argparse.Namespace, Config], int]

_EXPECTED_ERRORS = (
    IndexIOError,
    InvalidRecordError,
    TerminalError,
    RemoteUrlError,
    GitCommandError,
    ValueError,
    OSError,
)


def build_arg_parser() -> argparse.ArgumentParser:
    """Build the argument parser with all sub-commands."""
    parser = argparse.ArgumentParser(
        prog="gorg", description="Find and manage local Git working copies."
    )
    parser.add_argument("-c", "--config", default=None, help="Path to the configuration file.")
    parser.add_argument("--projects-path", default=None, help="Override the projects directory.")
    parser.add_argument("--index-file", default=None, help="Override the index file path.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")
    subparsers = parser.add_subparsers(dest="command_name")

    find = subparsers.add_parser("find", help="Find a project using the fuzzy matcher.")
    find.add_argument("query", nargs="*", help="Initial query.")
    find.add_argument("-f", "--full-path", action="store_true", help="Print the full path.")
    find.add_argument("--max-items", type=int, default=None, help="Maximum results shown.")
    find.set_defaults(handler=_handle_find)

    init = subparsers.add_parser("init", help="Initialize a repository for the given remote.")
    init.add_argument("remote", nargs="+", help="Remote URL or URL parts.")
    init.add_argument("--no-clone", action="store_true", help="Run git init instead of clone.")
    init.set_defaults(handler=_handle_init)

    list_parser = subparsers.add_parser(
        "list", aliases=["ls"], help="List projects matching the query."
    )
    list_parser.add_argument("query", nargs="*", help="Fuzzy query; lists all when omitted.")
    list_parser.add_argument("-f", "--full-path", action="store_true", help="Print full paths.")
    list_parser.add_argument(
        "-p", "--prefix-search", action="store_true", help="Match by prefix instead."
    )
    list_parser.set_defaults(handler=_handle_list)

    run = subparsers.add_parser("run", help="Run a command in all matching projects.")
    run.add_argument("-q", "--query", default=None, help="Fuzzy query selecting projects.")
    run.add_argument("-d", "--dry", action="store_true", help="Only print the target projects.")
    run.add_argument("--quiet", action="store_true", help="Do not print project names.")
    run.add_argument("command", nargs=argparse.REMAINDER, help="Command and its arguments.")
    run.set_defaults(handler=_handle_run)

    update = subparsers.add_parser(
        "update-index", help="Scan the projects directory and rebuild the index."
    )
    update.set_defaults(handler=_handle_update_index)
    return parser


def main(argv: list[str] | None = None) -> int:
    """Entrypoint for the gorg command."""
    parser = build_arg_parser()
    args = parser.parse_args(argv)
    configure_logging(verbose=args.verbose, environ=os.environ)

    handler: Handler | None = getattr(args, "handler", None)
    if handler is None:
        parser.print_usage(sys.stderr)
        print("gorg: error: no sub-command specified", file=sys.stderr)
        return 2

    try:
        config = load_effective_config(
            config_path=Path(args.config) if args.config is not None else None,
            overrides=CliOverrides(
                projects_path=Path(args.projects_path) if args.projects_path else None,
                index_file_path=Path(args.index_file) if args.index_file else None,
                max_find_items=getattr(args, "max_items", None),
            ),
        )
    except _EXPECTED_ERRORS as exc:
        print(f"gorg: error: {exc}", file=sys.stderr)
        return 1
    LOGGER.debug("Effective config: %s", config.to_public_dict())

    error_code: str | None = None
    try:
        exit_code = handler(args, config)
    except _EXPECTED_ERRORS as exc:
        print(f"gorg: error: {exc}", file=sys.stderr)
        exit_code = 1
        error_code = type(exc).__name__
    _record_audit_event(config, args, exit_code, error_code)
    return exit_code


def _handle_find(args: argparse.Namespace, config: Config) -> int:
    index = _load_index_or_fail(config)
    query = " ".join(args.query)
    LOGGER.debug("Find with query of length %d", len(query))
    selection = find_interactive(
        view=index.view(),
        query=query,
        max_items=config.max_find_items,
        open_session=_open_prompt_session,
        keys=_stdin_keys(),
    )
    if selection is not None:
        print(_format_project(config, selection, args.full_path))
    return 0


def _open_prompt_session(query: str) -> PromptSession:
    return PromptSession(output=sys.stderr, terminal=RawTerminal(sys.stdin.fileno()), query=query)


def _stdin_keys() -> Iterator[Key]:
    yield from read_keys(sys.stdin.fileno())


def _handle_list(args: argparse.Namespace, config: Config) -> int:
    index = _load_index_or_fail(config)
    query = " ".join(args.query)
    LOGGER.debug("List with query of length %d", len(query))
    matches = index.find_by_prefix(query) if args.prefix_search else index.find_matches(query)
    for project in matches:
        sys.stdout.write(f"{_format_project(config, project, args.full_path)}\n")
    return 0


def _handle_run(args: argparse.Namespace, config: Config) -> int:
    command = list(args.command)
    if command and command[0] == "--":
        command = command[1:]
    if not command:
        LOGGER.error("No command specified")
        return 1

    index = _load_index_or_fail(config)
    command_line = " ".join(command)
    success = True
    for project in index.find_matches(args.query or ""):
        if args.dry:
            print(f"dry! {project}: {command_line}", file=sys.stderr)
            continue
        if not args.quiet:
            print(f"{project}: {command_line}", file=sys.stderr)
        try:
            completed = subprocess.run(command, cwd=config.projects_path / project, check=False)
        except OSError as exc:
            LOGGER.warning("Failed to run command in %s: %s", project, exc)
            success = False
            continue
        if completed.returncode != 0:
            LOGGER.warning("Command exited with status %d in %s", completed.returncode, project)
            success = False
    return 0 if success else 1


def _handle_init(args: argparse.Namespace, config: Config) -> int:
    git = GitCommand(config.git.command)
    repo_url = url_from_parts(args.remote)
    path_parts = url_to_path(repo_url)
    project_name = "/".join(path_parts)
    project_dir = config.projects_path.joinpath(*path_parts)
    LOGGER.debug("Git URL = %s, project path = %s", repo_url, project_name)

    if not (project_dir / ".git").exists():
        if args.no_clone:
            LOGGER.debug("Git init for %s", project_dir)
            project_dir.mkdir(parents=True, exist_ok=True)
            git.init(project_dir)
        else:
            LOGGER.debug("Git clone for %s from %s", project_dir, repo_url)
            git.clone(repo_url, project_dir)

    remote_name = config.git.remote_name
    if remote_name in git.remote_list(project_dir):
        LOGGER.debug("Git set remote %s=%s for %s", remote_name, repo_url, project_dir)
        git.remote_set_url(remote_name, repo_url, project_dir)
    else:
        LOGGER.debug("Git add remote %s=%s for %s", remote_name, repo_url, project_dir)
        git.remote_add(remote_name, repo_url, project_dir)

    index = RepoIndex.load(config.index_file_path) or RepoIndex.empty()
    if index.add(project_name):
        LOGGER.debug("Saving project to index %s", config.index_file_path)
        index.save(config.index_file_path)
    return 0


def _handle_update_index(_: argparse.Namespace, config: Config) -> int:
    if not config.projects_path.is_dir():
        LOGGER.error("Project directory does not exist: %s", config.projects_path)
        return 1
    index = RepoIndex.from_entries(discover_repositories(config.projects_path))
    index.save(config.index_file_path)
    return 0


def _load_index_or_fail(config: Config) -> RepoIndex:
    index = RepoIndex.load(config.index_file_path)
    if index is None:
        raise IndexIOError(
            path=config.index_file_path,
            reason="Index not found (run 'gorg update-index' first)",
        )
    return index


def _format_project(config: Config, project: str, full_path: bool) -> str:
    if full_path:
        return str(config.projects_path / project)
    return project


def _record_audit_event(
    config: Config, args: argparse.Namespace, exit_code: int, error_code: str | None
) -> None:
    if config.audit_log_path is None:
        return
    event = build_event(args.command_name, exit_code, error_code, vars(args))
    try:
        JsonlAuditLogger(config.audit_log_path).append(event)
    except OSError as exc:
        LOGGER.warning("Failed to write audit log %s: %s", config.audit_log_path, exc)


if __name__ == "__main__":
    raise SystemExit(main())
