"""Command-line interface for update-workspace-snippets.

A command like

    update-workspace-snippets README.md MODULE.bazel

updates the git_override and http_archive stanzas in the listed files so
that they point to the latest commit on the default branch of the GitHub
repository. The current directory must be in a Git repository with exactly
one remote pointing to GitHub. Comments within a stanza that look like
dates are updated as well.

Run it after pushing to GitHub. It only changes documentation, so the
resulting commit can point to the previous one.
"""

import os
import sys
from typing import List

import click

from workspace_snippets.config import get_timeout, get_url_prefix
from workspace_snippets.core.updater import FileUpdate, Updater
from workspace_snippets.errors import FileUpdateError, UpdaterError
from workspace_snippets.utils.console import (
    _create_summary_table,
    _print_table,
    _rich_error,
    _rich_info,
    _rich_success,
    _rich_warning,
)
from workspace_snippets.version import get_version


class UpdateSummary:
    """Summary of per-file update results."""

    def __init__(self):
        self.updated: List[FileUpdate] = []
        self.unchanged: List[FileUpdate] = []
        self.failed: List[dict] = []

    def add(self, result: FileUpdate):
        """Record a successfully processed file."""
        if result.changed:
            self.updated.append(result)
        else:
            self.unchanged.append(result)

    def add_failed(self, file: str, reason: str):
        """Record a file that couldn't be updated."""
        self.failed.append({"file": file, "reason": reason})

    @property
    def success(self) -> bool:
        return not self.failed

    @property
    def skipped_stanzas(self) -> int:
        return sum(len(result.skipped_stanzas) for result in self.updated + self.unchanged)

    def rows(self, dry_run: bool = False):
        changed = "would update" if dry_run else "updated"
        for result in self.updated:
            yield result.path, _with_skipped(changed, result)
        for result in self.unchanged:
            yield result.path, _with_skipped("up to date", result)
        for item in self.failed:
            yield item["file"], "failed"

    def log_summary(self, dry_run: bool = False):
        """Log a summary of update results."""
        table = _create_summary_table(list(self.rows(dry_run)), title="Workspace snippets")
        if table is not None:
            _print_table(table)
        if self.skipped_stanzas:
            _rich_warning(f"{self.skipped_stanzas} stanza(s) couldn't be parsed and were left unchanged",
                          symbol="warning")
        if self.failed:
            _rich_error(f"{len(self.failed)} of {len(self.failed) + len(self.updated) + len(self.unchanged)} "
                        f"files failed", symbol="error")


def _with_skipped(status: str, result: FileUpdate) -> str:
    if not result.skipped_stanzas:
        return status
    return f"{status} ({len(result.skipped_stanzas)} stanza(s) skipped)"


def print_version(ctx, param, value):
    """Print version and exit."""
    if not value or ctx.resilient_parsing:
        return
    click.echo(f"update-workspace-snippets version {get_version()}")
    ctx.exit()


@click.command(help="Update git_override and http_archive snippets to the latest GitHub commit")
@click.argument('files', nargs=-1, required=True)
@click.option('--url-prefix', default=get_url_prefix, show_default="https://github.com/",
              help="Prefix the URL of the GitHub remote must start with")
@click.option('--timeout', type=float, default=get_timeout, show_default="60",
              help="Timeout in seconds for downloading the archive")
@click.option('--dry-run', is_flag=True, help="Show which files would change without writing them")
@click.option('--version', is_flag=True, callback=print_version,
              expose_value=False, is_eager=True, help="Show version and exit.")
def cli(files, url_prefix, timeout, dry_run):
    """Main entry point for update-workspace-snippets."""
    try:
        updater = Updater.from_repository(os.getcwd(), url_prefix, timeout=timeout)
    except UpdaterError as e:
        _rich_error(str(e), symbol="error")
        sys.exit(1)

    context = updater.context
    _rich_info(f"Latest commit {context.commit_hash} ({context.date}), "
               f"archive SHA-256 {context.archive_checksum}", symbol="info")

    summary = UpdateSummary()
    for file in files:
        try:
            result = updater.update(file, dry_run=dry_run)
        except FileUpdateError as e:
            _rich_error(str(e), symbol="error")
            summary.add_failed(file, str(e))
            continue
        for stanza in result.skipped_stanzas:
            _rich_warning(f"{file}:{stanza.line}: can't parse {stanza.kind.value} stanza, left unchanged",
                          symbol="warning")
        if result.changed:
            verb = "Would update" if dry_run else "Updated"
            _rich_success(f"{verb} {file}", symbol="check")
        summary.add(result)

    summary.log_summary(dry_run)
    if not summary.success:
        sys.exit(1)


def main():
    """Main entry point for the CLI."""
    try:
        cli()
    except ValueError as e:
        _rich_error(f"Error: {e}", symbol="error")
        sys.exit(1)


if __name__ == "__main__":
    main()
