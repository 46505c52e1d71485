"""
Command-line interface for diff review.

This module provides the CLI using Click framework for argument parsing
and orchestrates the review pipeline.
"""

import json
import logging
import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from diff_review import __version__
from diff_review.config import Config, find_config_file, load_config
from diff_review.errors import DiffReviewError
from diff_review.models.result import DiffResult

console = Console()

FORMAT_CHOICES = ["text", "json", "yaml", "markdown"]
DEFAULT_STORE_PATH = Path(".diff-review") / "results.json"

logger = logging.getLogger(__name__)


def _setup_logging(verbose: bool) -> None:
    """Route log records through Rich; debug level when verbose."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=verbose)],
        force=True,
    )


def _emit(text: str, output: Optional[Path]) -> None:
    """Write formatted output to a file or stdout."""
    if output:
        output.write_text(text, encoding="utf-8")
        console.print(f"[green]Results written to:[/green] {output}")
    else:
        # Print directly to stdout to preserve ANSI codes from formatter
        sys.stdout.write(text)
        if not text.endswith("\n"):
            sys.stdout.write("\n")
        sys.stdout.flush()


def _formatter(config: Config, output_format: str, show_all: bool):
    from diff_review.output.formatters import get_formatter

    options = {"include_unchanged": show_all or config.output.show_unchanged_groups}
    if output_format == "text":
        options["colorize"] = config.output.colorize
    return get_formatter(output_format, **options)


def _fail(error: Exception, verbose: bool) -> None:
    console.print(f"[red]Error:[/red] {escape(str(error))}")
    if verbose:
        import traceback
        console.print(traceback.format_exc())
    raise click.Abort()


format_option = click.option(
    "--format",
    "-f",
    "output_format",
    type=click.Choice(FORMAT_CHOICES),
    default="text",
    help="Output format (default: text).",
)
output_option = click.option(
    "--output",
    "-o",
    type=click.Path(path_type=Path),
    help="Output file path. If not specified, prints to stdout.",
)
all_option = click.option(
    "--all",
    "show_all",
    is_flag=True,
    help="Also show hunks without changes.",
)


@click.group()
@click.version_option(version=__version__, prog_name="diff-review")
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, path_type=Path),
    help="Path to configuration file. Defaults to the nearest .diff-review.yaml.",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose output.",
)
@click.pass_context
def cli(ctx: click.Context, config: Optional[Path], verbose: bool) -> None:
    """Diff Review - Parse, apply and review file edits side by side."""
    ctx.ensure_object(dict)
    config_path = config or find_config_file(Path.cwd())
    try:
        loaded = load_config(config_path)
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise click.Abort()
    verbose = verbose or loaded.output.verbose
    _setup_logging(verbose)
    if config_path:
        logger.debug("Loaded configuration from %s", config_path)
    ctx.obj["config"] = loaded
    ctx.obj["verbose"] = verbose


@cli.command()
@click.argument("old", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("new", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--producer",
    type=click.Choice(["difflib", "git"]),
    help="Diff producer (default: from configuration).",
)
@click.option(
    "--context",
    "-U",
    "context_lines",
    type=click.IntRange(min=0),
    help="Context lines around each change.",
)
@format_option
@output_option
@all_option
@click.pass_context
def diff(
    ctx: click.Context,
    old: Path,
    new: Path,
    producer: Optional[str],
    context_lines: Optional[int],
    output_format: str,
    output: Optional[Path],
    show_all: bool,
) -> None:
    """Compare two files and show the changes hunk by hunk."""
    from diff_review.review.processor import DiffReviewProcessor

    config: Config = ctx.obj["config"]
    updates = {}
    if producer:
        updates["producer"] = producer
    if context_lines is not None:
        updates["context_lines"] = context_lines
    if updates:
        config = config.model_copy(update={"diff": config.diff.model_copy(update=updates)})

    try:
        result = DiffResult.for_file(
            file_path=str(new),
            original=old.read_text(encoding="utf-8"),
            updated=new.read_text(encoding="utf-8"),
        )
        state = DiffReviewProcessor(config).process(result)
        _emit(_formatter(config, output_format, show_all).format(state), output)
    except (DiffReviewError, OSError, ValueError) as e:
        _fail(e, ctx.obj["verbose"])


@cli.command()
@click.argument("patch", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("target", type=click.Path(dir_okay=False, path_type=Path))
@click.option(
    "--write",
    "-w",
    is_flag=True,
    help="Write the patched content back to TARGET.",
)
@click.option(
    "--check",
    is_flag=True,
    help="Only report which search texts cannot be found.",
)
@click.option(
    "--partial",
    is_flag=True,
    help="Keep the edits applied before the first failing one.",
)
@click.option(
    "--reverse",
    "-R",
    is_flag=True,
    help="Undo PATCH: apply the inverse of each edit, last edit first.",
)
@format_option
@output_option
@all_option
@click.pass_context
def apply(
    ctx: click.Context,
    patch: Path,
    target: Path,
    write: bool,
    check: bool,
    partial: bool,
    reverse: bool,
    output_format: str,
    output: Optional[Path],
    show_all: bool,
) -> None:
    """Apply a search/replace PATCH to TARGET and show the result."""
    from diff_review.parser.patch_parser import PatchParser
    from diff_review.patching.applier import PatchApplier
    from diff_review.review.processor import DiffReviewProcessor

    config: Config = ctx.obj["config"]
    verbose: bool = ctx.obj["verbose"]

    try:
        patch_text = patch.read_text(encoding="utf-8")
        original = target.read_text(encoding="utf-8") if target.exists() else ""
        changes = PatchParser().parse(patch_text)
        if reverse:
            changes = [change.inverse() for change in reversed(changes)]
        applier = PatchApplier(require_unique=config.patch.require_unique_match)

        if check:
            errors = applier.validate(changes, original)
            if errors:
                for error in errors:
                    console.print(f"[red]Failed:[/red] {escape(str(error))}")
                console.print(f"{len(errors)} of {len(changes)} edits cannot be applied")
                ctx.exit(1)
            console.print(f"[green]All {len(changes)} edits apply cleanly[/green]")
            return

        if partial:
            outcome = applier.apply_partial(changes, original)
            if not outcome.complete:
                console.print(
                    f"[yellow]Applied {outcome.applied} of {len(changes)} edits:[/yellow] "
                    f"{escape(outcome.error)}"
                )
            changes = changes[:outcome.applied]
            updated = outcome.content
        else:
            updated = applier.apply(changes, original)

        if changes:
            result = DiffResult.for_file(
                file_path=str(target),
                original=original,
                diff="\n".join(change.to_tagged() for change in changes),
                edits=changes,
            )
        else:
            result = DiffResult.for_file(file_path=str(target), original=original, updated=original)
        state = DiffReviewProcessor(config).process(result)
        _emit(_formatter(config, output_format, show_all).format(state), output)

        if write:
            target.write_text(updated, encoding="utf-8")
            console.print(f"[green]Patched:[/green] {target}")
    except (DiffReviewError, OSError, ValueError) as e:
        _fail(e, verbose)


@cli.command()
@click.argument("payload", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--tool",
    type=click.Choice(["record", "edit", "write"]),
    default="record",
    help="Kind of PAYLOAD: a stored record, or an Edit/MultiEdit or Write tool payload.",
)
@click.option(
    "--accept",
    "accepted",
    multiple=True,
    help="Hunk id to accept; prints the content with only the accepted hunks applied.",
)
@click.option(
    "--save",
    "store_path",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Save the reviewed record to this store file.",
)
@format_option
@output_option
@all_option
@click.pass_context
def review(
    ctx: click.Context,
    payload: Path,
    tool: str,
    accepted: tuple[str, ...],
    store_path: Optional[Path],
    output_format: str,
    output: Optional[Path],
    show_all: bool,
) -> None:
    """Review an edit record or an edit tool PAYLOAD."""
    from diff_review.review.edits import (
        FileContent,
        FileEdit,
        diff_result_for_edit,
        diff_result_for_write,
    )
    from diff_review.review.grouping import apply_selected_groups
    from diff_review.review.processor import DiffReviewProcessor
    from diff_review.storage import DiffResultStore

    config: Config = ctx.obj["config"]

    try:
        data = json.loads(payload.read_text(encoding="utf-8"))
        if tool == "edit":
            file_edit = FileEdit.model_validate(data)
            current = Path(file_edit.file_path).read_text(encoding="utf-8")
            result = diff_result_for_edit(file_edit, current)
        elif tool == "write":
            file_content = FileContent.model_validate(data)
            target = Path(file_content.file_path)
            current = target.read_text(encoding="utf-8") if target.exists() else None
            result = diff_result_for_write(file_content, current)
        else:
            result = DiffResult.from_record(data)

        state = DiffReviewProcessor(config).process(result)

        if store_path:
            DiffResultStore(store_path).save(state.result)
            console.print(f"[green]Saved to:[/green] {store_path}")

        if accepted:
            known = {group.id for group in state.changed_groups}
            unknown = sorted(set(accepted) - known)
            if unknown:
                raise ValueError(f"Unknown hunk id(s): {', '.join(unknown)}")
            merged = apply_selected_groups(
                state.file_change.old_content,
                state.file_change.new_content,
                state.groups,
                set(accepted),
            )
            _emit(merged, output)
            return

        _emit(_formatter(config, output_format, show_all).format(state), output)
    except (DiffReviewError, OSError, ValueError) as e:
        _fail(e, ctx.obj["verbose"])


@cli.group()
@click.option(
    "--path",
    "-p",
    "store_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=DEFAULT_STORE_PATH,
    show_default=True,
    help="Store file.",
)
@click.pass_context
def store(ctx: click.Context, store_path: Path) -> None:
    """Inspect stored edit records."""
    from diff_review.storage import DiffResultStore

    ctx.obj["store"] = DiffResultStore(store_path)


@store.command("list")
@format_option
@click.pass_context
def store_list(ctx: click.Context, output_format: str) -> None:
    """List stored edit records."""
    config: Config = ctx.obj["config"]
    try:
        results = ctx.obj["store"].all()
        _emit(_formatter(config, output_format, False).format_results(results), None)
    except (DiffReviewError, OSError, ValueError) as e:
        _fail(e, ctx.obj["verbose"])


@store.command("show")
@click.argument("file_path")
@format_option
@all_option
@click.pass_context
def store_show(ctx: click.Context, file_path: str, output_format: str, show_all: bool) -> None:
    """Review the stored edit record of FILE_PATH."""
    from diff_review.review.processor import DiffReviewProcessor

    config: Config = ctx.obj["config"]
    try:
        result = ctx.obj["store"].get(file_path)
        if result is None:
            raise ValueError(f"No stored edit for {file_path}")
        state = DiffReviewProcessor(config).process(result)
        _emit(_formatter(config, output_format, show_all).format(state), None)
    except (DiffReviewError, OSError, ValueError) as e:
        _fail(e, ctx.obj["verbose"])


@store.command("remove")
@click.argument("file_path")
@click.pass_context
def store_remove(ctx: click.Context, file_path: str) -> None:
    """Remove the stored edit record of FILE_PATH."""
    try:
        removed = ctx.obj["store"].remove(file_path)
    except (OSError, ValueError) as e:
        _fail(e, ctx.obj["verbose"])
    if removed:
        console.print(f"[green]Removed:[/green] {file_path}")
    else:
        console.print(f"[yellow]No stored edit for[/yellow] {file_path}")


@store.command("clear")
@click.pass_context
def store_clear(ctx: click.Context) -> None:
    """Remove every stored edit record."""
    try:
        ctx.obj["store"].clear()
    except OSError as e:
        _fail(e, ctx.obj["verbose"])
    console.print("[green]Store cleared[/green]")


def main() -> None:
    """Main entry point for the CLI."""
    cli(obj={})
