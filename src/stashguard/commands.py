from __future__ import annotations

import argparse
import sys
from pathlib import Path

from stashguard.config import _load_stash_config, _load_task_specs
from stashguard.console import Console
from stashguard.constants import (
    CONTEXT_GIT_PRE_COMMIT,
    CONTEXT_RUN,
    POLICY_RELATIVE_PATH,
    PRE_COMMIT_HOOK_TEMPLATE,
)
from stashguard.git import GitRepository
from stashguard.models import ConfigError, GitCommandError, RunContext, StashPopError
from stashguard.runner import run_tasks
from stashguard.stash import StashUnstagedChanges


def _resolve_repo_root(args: argparse.Namespace) -> Path:
    return Path(args.repo).expanduser().resolve()


def _run_in_context(args: argparse.Namespace, *, command_name: str, kind: str) -> int:
    repo_root = _resolve_repo_root(args)
    try:
        config = _load_stash_config(repo_root)
        tasks = _load_task_specs(repo_root)
    except ConfigError as exc:
        print(f"stashguard {command_name}: ERROR {exc}", file=sys.stderr)
        return 1

    repository = GitRepository(repo_root)
    files: tuple[str, ...] = ()
    if kind == CONTEXT_GIT_PRE_COMMIT:
        if not repository.is_worktree():
            print(
                f"stashguard {command_name}: ERROR {repo_root} is not a git work tree",
                file=sys.stderr,
            )
            return 1
        try:
            files = tuple(repository.staged_files())
        except GitCommandError as exc:
            print(f"stashguard {command_name}: ERROR {exc}", file=sys.stderr)
            return 1
    context = RunContext(kind=kind, files=files)

    console = Console(repo_root)
    stash = StashUnstagedChanges(config, repository, console)
    if not tasks:
        console.write(f"No tasks configured in {POLICY_RELATIVE_PATH}.")
    try:
        report = run_tasks(repo_root, context, tasks, stash=stash, console=console)
    except StashPopError as exc:
        console.error(str(exc))
        return 1
    except Exception as exc:
        stash.safety_net.record_fatal(exc)
        try:
            stash.on_fatal_error()
        except StashPopError as pop_exc:
            console.error(str(pop_exc))
        print(f"stashguard {command_name}: ERROR {exc}", file=sys.stderr)
        return 1

    if report.passed:
        console.write(f"stashguard {command_name}: all {len(report.results)} task(s) passed")
        return 0
    console.write(
        f"stashguard {command_name}: failed tasks: {', '.join(report.failed_tasks)}"
    )
    return 1


def _cmd_git_pre_commit(args: argparse.Namespace) -> int:
    return _run_in_context(args, command_name="git-pre-commit", kind=CONTEXT_GIT_PRE_COMMIT)


def _cmd_run(args: argparse.Namespace) -> int:
    return _run_in_context(args, command_name="run", kind=CONTEXT_RUN)


def _cmd_config(args: argparse.Namespace) -> int:
    repo_root = _resolve_repo_root(args)
    try:
        config = _load_stash_config(repo_root)
        tasks = _load_task_specs(repo_root)
    except ConfigError as exc:
        print(f"stashguard config: ERROR {exc}", file=sys.stderr)
        return 1

    print("stashguard config")
    print(f"policy_file: {repo_root / POLICY_RELATIVE_PATH}")
    print(f"ignore_unstaged_changes: {str(config.ignore_unstaged_changes).lower()}")
    print(f"label_prefix: {config.label_prefix}")
    print(f"tasks: {len(tasks)}")
    for task in tasks:
        print(f"- {task.name}: {task.command}")
    return 0


def _cmd_install_hook(args: argparse.Namespace) -> int:
    repo_root = _resolve_repo_root(args)
    repository = GitRepository(repo_root)
    if not repository.is_worktree():
        print(
            f"stashguard install-hook: ERROR {repo_root} is not a git work tree",
            file=sys.stderr,
        )
        return 1
    hooks = repository.run(["rev-parse", "--git-path", "hooks"])
    if hooks.returncode != 0:
        detail = (hooks.stderr or hooks.stdout or "not a git repository").strip()
        print(f"stashguard install-hook: ERROR {detail}", file=sys.stderr)
        return 1
    hooks_dir = Path(hooks.stdout.strip())
    if not hooks_dir.is_absolute():
        hooks_dir = repo_root / hooks_dir
    hook_path = hooks_dir / "pre-commit"
    if hook_path.exists() and not args.force:
        print(
            f"stashguard install-hook: {hook_path} already exists. Add --force to overwrite.",
            file=sys.stderr,
        )
        return 1

    hooks_dir.mkdir(parents=True, exist_ok=True)
    hook_path.write_text(
        PRE_COMMIT_HOOK_TEMPLATE.format(python=sys.executable), encoding="utf-8"
    )
    hook_path.chmod(0o755)
    print(f"stashguard install-hook: wrote {hook_path}")
    return 0


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Run checks against staged changes with unstaged edits stashed away"
    )
    subparsers = parser.add_subparsers(dest="command")

    def _add_repo_argument(subparser: argparse.ArgumentParser) -> None:
        subparser.add_argument(
            "--repo",
            default=".",
            help="Path to the git repository (default: current directory)",
        )

    pre_commit = subparsers.add_parser(
        "git-pre-commit",
        help="Run configured tasks as a pre-commit hook (stashes unstaged changes)",
    )
    _add_repo_argument(pre_commit)
    pre_commit.set_defaults(handler=_cmd_git_pre_commit)

    run = subparsers.add_parser("run", help="Run configured tasks against the working tree")
    _add_repo_argument(run)
    run.set_defaults(handler=_cmd_run)

    config = subparsers.add_parser("config", help="Show resolved stashguard settings")
    _add_repo_argument(config)
    config.set_defaults(handler=_cmd_config)

    install_hook = subparsers.add_parser(
        "install-hook", help="Install a git pre-commit hook that runs stashguard"
    )
    _add_repo_argument(install_hook)
    install_hook.add_argument(
        "--force",
        action="store_true",
        help="Overwrite an existing pre-commit hook",
    )
    install_hook.set_defaults(handler=_cmd_install_hook)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    handler = getattr(args, "handler", None)
    if handler is None:
        parser.print_help()
        return 2
    return int(handler(args))
