"""
Tag CLI commands for tagsmith.

Commands for editing the caption files of an image directory. Every
command loads the directory, applies one action through a
``TagEditorSession`` and, for edits, writes back only the captions that
changed (nothing at all with ``--dry-run``).

Scope options shared by the edit commands:

- ``--only ID`` (repeatable) limits the edit to those images;
- ``--filter TEXT`` / ``--has-tag TAG`` limit it to images whose file name
  or caption contains TEXT and/or that carry TAG.
"""

from __future__ import annotations

import logging
import random
from collections.abc import Callable
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from tagsmith.cli.constants import (
    CAPTION_PREVIEW_LENGTH,
    CHANGED_RECORDS_DISPLAY_LIMIT,
    DEFAULT_TAG_LIST_LIMIT,
    EXIT_USER_ERROR,
    PAIR_DELIMITER,
)
from tagsmith.cli.errors import (
    ErrorCategory,
    display_error_panel,
    display_success_panel,
    display_warning_panel,
    get_exit_code_for_category,
)
from tagsmith.config.settings import get_settings
from tagsmith.exceptions import (
    CaptionStoreError,
    InvalidPatternError,
    TagsmithError,
)
from tagsmith.models.enums import ScopeMode, SortOrder, TagSortMode
from tagsmith.models.image_record import ImageRecord
from tagsmith.models.regex_options import RegexOptions
from tagsmith.models.tag_change import TagChange
from tagsmith.models.tag_pair import AbstractTagPair
from tagsmith.services.editor_session import TagEditorSession
from tagsmith.services.scope import ScopePredicate, build_scope
from tagsmith.services.tag_edit import RandomSource
from tagsmith.services.tag_stats import (
    build_all_tags_list,
    build_caption_preview,
    count_tags,
)
from tagsmith.services.undo_redo import UndoRedoStack
from tagsmith.storage.caption_store import write_tags_for_image
from tagsmith.storage.loader import load_image_set
from tagsmith.storage.preset_store import load_preset_pairs, save_preset_pairs
from tagsmith.utils.fuzzy import suggest_tags

logger = logging.getLogger(__name__)

console = Console()

tag_app = typer.Typer(
    name="tags",
    help="🏷️ Batch caption tag editing",
    no_args_is_help=True,
)

EditAction = Callable[[TagEditorSession, ScopePredicate], TagChange]

DIRECTORY_ARGUMENT = typer.Argument(
    ...,
    exists=True,
    file_okay=False,
    dir_okay=True,
    resolve_path=True,
    help="Directory containing images and their .txt captions",
)
SEPARATOR_OPTION = typer.Option(
    None, "--separator", "-s", help="Tag separator (defaults to the configured one)"
)
DRY_RUN_OPTION = typer.Option(
    False, "--dry-run", "-n", help="Show what would change without writing files"
)
ONLY_OPTION = typer.Option(
    None, "--only", help="Limit the edit to this image id (repeatable)"
)
FILTER_OPTION = typer.Option(
    None, "--filter", "-f", help="Limit to images whose name or caption contains TEXT"
)
HAS_TAG_OPTION = typer.Option(
    None, "--has-tag", help="Limit to images carrying this exact tag"
)
KEEP_FIRST_OPTION = typer.Option(
    False, "--keep-first", "-k", help="Leave the first tag of each caption in place"
)
REGEX_OPTION = typer.Option(
    False, "--regex", "-r", help="Treat the pattern as a regular expression"
)
IGNORE_CASE_OPTION = typer.Option(
    False, "--ignore-case", "-i", help="Case-insensitive regex matching"
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _open_session(
    directory: Path,
    separator: Optional[str],
    rng: RandomSource = random.random,
) -> TagEditorSession:
    """Load *directory* into a fresh editing session."""
    settings = get_settings()
    tag_separator = separator or settings.tag_separator
    images = load_image_set(
        directory,
        tag_separator,
        allowed_extensions=settings.image_extensions,
        include_subdirectories=settings.include_subdirectories,
        load_dimensions=settings.load_dimensions,
    )
    return TagEditorSession(
        images,
        tag_separator=tag_separator,
        history=UndoRedoStack(settings.history_limit),
        preset_pairs=load_preset_pairs(directory, settings.preset_file_name),
        rng=rng,
    )


def _build_scope(
    session: TagEditorSession,
    only: Optional[List[str]],
    filter_text: Optional[str],
    has_tag: Optional[str],
) -> ScopePredicate:
    if only:
        return build_scope(ScopeMode.SELECTED, session.images, selected_ids=only)
    if filter_text or has_tag:
        return build_scope(
            ScopeMode.FILTERED,
            session.images,
            filter_text=filter_text or "",
            tag_filter=has_tag,
            tag_separator=session.tag_separator,
        )
    return build_scope(ScopeMode.ALL, session.images)


def _caption_sink(tag_separator: str) -> Callable[[ImageRecord], None]:
    def write(image: ImageRecord) -> None:
        if image.source is None:
            raise CaptionStoreError(
                Path(image.id), f"Record {image.id} has no source image file"
            )
        write_tags_for_image(image.source, image.tags, tag_separator)

    return write


def _parse_pairs(raw_pairs: List[str]) -> List[AbstractTagPair]:
    pairs = []
    for raw in raw_pairs:
        abstract_tag, delimiter, concrete_tag = raw.partition(PAIR_DELIMITER)
        if not delimiter or not abstract_tag.strip() or not concrete_tag.strip():
            display_error_panel(
                ErrorCategory.VALIDATION,
                f"Invalid pair {raw!r}",
                hint=f"Write pairs as 'abstract{PAIR_DELIMITER}concrete'",
            )
            raise typer.Exit(EXIT_USER_ERROR)
        pairs.append(
            AbstractTagPair(
                abstract_tag=abstract_tag.strip(), concrete_tag=concrete_tag.strip()
            )
        )
    return pairs


def _report_change(
    session: TagEditorSession, action_name: str, change: TagChange
) -> None:
    if not change.changed_ids:
        display_warning_panel(f"{action_name}: no images changed", title="No Changes")
        return

    changed = set(change.changed_ids)
    table = Table(
        title=f"Changed images ({len(change.changed_ids)} of {len(session.images)})",
        show_header=True,
        header_style="bold blue",
    )
    table.add_column("Image", style="cyan")
    table.add_column("Caption", style="green")
    shown = [image for image in change.images if image.id in changed]
    for image in shown[:CHANGED_RECORDS_DISPLAY_LIMIT]:
        preview = build_caption_preview(
            image.tags, session.tag_separator, CAPTION_PREVIEW_LENGTH
        )
        table.add_row(escape(image.id), escape(preview))
    console.print(table)
    hidden = len(shown) - CHANGED_RECORDS_DISPLAY_LIMIT
    if hidden > 0:
        console.print(f"[dim]... and {hidden} more[/dim]")


def _run_edit(
    directory: Path,
    separator: Optional[str],
    dry_run: bool,
    action_name: str,
    action: EditAction,
    only: Optional[List[str]] = None,
    filter_text: Optional[str] = None,
    has_tag: Optional[str] = None,
    rng: RandomSource = random.random,
) -> tuple[TagEditorSession, TagChange]:
    """Load, edit, report and (unless dry-run) save one directory."""
    session = _open_session(directory, separator, rng)
    scope = _build_scope(session, only, filter_text, has_tag)
    try:
        change = action(session, scope)
    except InvalidPatternError as e:
        display_error_panel(
            ErrorCategory.VALIDATION,
            e.message,
            hint="Check the regular expression syntax",
        )
        raise typer.Exit(EXIT_USER_ERROR)

    _report_change(session, action_name, change)
    if not change.changed_ids:
        return session, change
    if dry_run:
        display_warning_panel("Dry run: no caption files were written", title="Dry Run")
        return session, change

    try:
        saved = session.save_dirty(_caption_sink(session.tag_separator))
    except TagsmithError as e:
        logger.warning("Saving captions failed: %s", e)
        display_error_panel(ErrorCategory.STORAGE, e.message)
        raise typer.Exit(get_exit_code_for_category(ErrorCategory.STORAGE))
    display_success_panel(f"{action_name}: wrote {len(saved)} caption files")
    return session, change


def _suggest_missing(session: TagEditorSession, tags_input: str) -> None:
    counts = count_tags(session.images)
    for tag in session.parse_tag_input(tags_input):
        if tag in counts:
            continue
        suggestions = suggest_tags(tag, counts)
        if suggestions:
            console.print(
                f"[yellow]No image has tag '{escape(tag)}'. Did you mean: "
                f"{escape(', '.join(suggestions))}?[/yellow]"
            )


# ---------------------------------------------------------------------------
# Read-only commands
# ---------------------------------------------------------------------------


@tag_app.command("list")
def list_tags(
    directory: Path = DIRECTORY_ARGUMENT,
    separator: Optional[str] = SEPARATOR_OPTION,
    search: str = typer.Option("", "--search", help="Only tags containing TEXT"),
    sort: TagSortMode = typer.Option(TagSortMode.FREQUENCY, "--sort", help="Sort mode"),
    order: SortOrder = typer.Option(SortOrder.DESC, "--order", help="Sort direction"),
    limit: int = typer.Option(
        DEFAULT_TAG_LIST_LIMIT, "--limit", "-l", help="Maximum number of tags to show"
    ),
) -> None:
    """List tags with the number of times they occur."""
    session = _open_session(directory, separator)
    stats = build_all_tags_list(session.images, search, sort, order)
    if not stats:
        display_warning_panel("No tags found", title="No Tags")
        return

    table = Table(
        title=f"Tags (showing {min(limit, len(stats))} of {len(stats)})",
        show_header=True,
        header_style="bold blue",
    )
    table.add_column("Tag", style="cyan")
    table.add_column("Count", style="green", justify="right")
    for stat in stats[:limit]:
        table.add_row(escape(stat.tag), f"{stat.count:,}")
    console.print(table)


@tag_app.command("count")
def count_matches(
    directory: Path = DIRECTORY_ARGUMENT,
    text: str = typer.Argument(..., help="Text or pattern to count"),
    separator: Optional[str] = SEPARATOR_OPTION,
    use_regex: bool = REGEX_OPTION,
    whole_tags: bool = typer.Option(
        False, "--whole-tags", "-w", help="Match whole tags only"
    ),
    ignore_case: bool = IGNORE_CASE_OPTION,
    only: Optional[List[str]] = ONLY_OPTION,
    filter_text: Optional[str] = FILTER_OPTION,
    has_tag: Optional[str] = HAS_TAG_OPTION,
) -> None:
    """Count occurrences of TEXT in captions."""
    session = _open_session(directory, separator)
    scope = _build_scope(session, only, filter_text, has_tag)
    try:
        total = session.match_count(
            text,
            use_regex=use_regex,
            whole_tags_only=whole_tags,
            ignore_case=ignore_case,
            scope=scope,
        )
    except InvalidPatternError as e:
        display_error_panel(ErrorCategory.VALIDATION, e.message)
        raise typer.Exit(EXIT_USER_ERROR)
    console.print(f"[bold]{total:,}[/bold] matches for [cyan]{escape(text)}[/cyan]")


@tag_app.command("conflicts")
def show_conflicts(
    directory: Path = DIRECTORY_ARGUMENT,
    separator: Optional[str] = SEPARATOR_OPTION,
    limit: int = typer.Option(20, "--limit", "-l", help="Maximum groups to show"),
    only: Optional[List[str]] = ONLY_OPTION,
    filter_text: Optional[str] = FILTER_OPTION,
    has_tag: Optional[str] = HAS_TAG_OPTION,
) -> None:
    """Show abstract tags that appear alongside a more concrete tag."""
    session = _open_session(directory, separator)
    scope = _build_scope(session, only, filter_text, has_tag)
    groups = session.abstract_conflicts(scope)
    if not groups:
        display_success_panel("No abstract/concrete tag pairs found", title="Conflicts")
        return

    table = Table(
        title=f"Abstract tag conflicts ({len(groups)} abstract tags)",
        show_header=True,
        header_style="bold blue",
    )
    table.add_column("Abstract", style="cyan")
    table.add_column("Concrete", style="magenta")
    table.add_column("Images", style="green", justify="right")
    table.add_column("Preset", justify="center")
    for group in groups[:limit]:
        for item in group.items:
            table.add_row(
                escape(item.abstract_tag),
                escape(item.concrete_tag),
                f"{item.count:,}",
                "✓" if item.is_preset else "",
            )
    console.print(table)


@tag_app.command("presets")
def manage_presets(
    directory: Path = DIRECTORY_ARGUMENT,
    add: Optional[List[str]] = typer.Option(
        None,
        "--add",
        "-a",
        help=f"Store a pair written as 'abstract{PAIR_DELIMITER}concrete'",
    ),
) -> None:
    """Show stored abstract/concrete presets, optionally adding new ones."""
    settings = get_settings()
    pairs = load_preset_pairs(directory, settings.preset_file_name)
    if add:
        session = TagEditorSession([], preset_pairs=pairs)
        before = len(session.preset_pairs)
        try:
            pairs = session.add_preset_pairs(
                _parse_pairs(add),
                sink=lambda merged: save_preset_pairs(
                    directory, merged, settings.preset_file_name
                ),
            )
        except TagsmithError as e:
            display_error_panel(ErrorCategory.STORAGE, e.message)
            raise typer.Exit(get_exit_code_for_category(ErrorCategory.STORAGE))
        display_success_panel(f"Stored {len(pairs) - before} new preset pairs")

    if not pairs:
        display_warning_panel("No preset pairs stored", title="Presets")
        return
    table = Table(title="Preset pairs", show_header=True, header_style="bold blue")
    table.add_column("Abstract", style="cyan")
    table.add_column("Concrete", style="magenta")
    for pair in pairs:
        table.add_row(escape(pair.abstract_tag), escape(pair.concrete_tag))
    console.print(table)


# ---------------------------------------------------------------------------
# Edit commands
# ---------------------------------------------------------------------------


@tag_app.command("add")
def add_tags(
    directory: Path = DIRECTORY_ARGUMENT,
    tags: str = typer.Argument(..., help="Tags to append, separator-delimited"),
    separator: Optional[str] = SEPARATOR_OPTION,
    dry_run: bool = DRY_RUN_OPTION,
    only: Optional[List[str]] = ONLY_OPTION,
    filter_text: Optional[str] = FILTER_OPTION,
    has_tag: Optional[str] = HAS_TAG_OPTION,
) -> None:
    """Append TAGS to every caption in scope."""
    _run_edit(
        directory,
        separator,
        dry_run,
        "Add Tags",
        lambda session, scope: session.add_tags(tags, scope),
        only,
        filter_text,
        has_tag,
    )


@tag_app.command("rename")
def rename_tags(
    directory: Path = DIRECTORY_ARGUMENT,
    old: str = typer.Argument(..., help="Tags (or a regex with --regex) to rename"),
    new: str = typer.Argument(..., help="Replacement tag"),
    separator: Optional[str] = SEPARATOR_OPTION,
    use_regex: bool = REGEX_OPTION,
    ignore_case: bool = IGNORE_CASE_OPTION,
    dry_run: bool = DRY_RUN_OPTION,
    only: Optional[List[str]] = ONLY_OPTION,
    filter_text: Optional[str] = FILTER_OPTION,
    has_tag: Optional[str] = HAS_TAG_OPTION,
) -> None:
    """Rename OLD tags to NEW. A regex must match the whole tag."""

    def action(session: TagEditorSession, scope: ScopePredicate) -> TagChange:
        if use_regex:
            pattern = RegexOptions(pattern=old, ignore_case=ignore_case)
            return session.rename_tags_matching(pattern, new, scope)
        return session.rename_tags(old, new, scope)

    session, change = _run_edit(
        directory, separator, dry_run, "Rename Tags", action, only, filter_text, has_tag
    )
    if not use_regex and not change.changed_ids:
        _suggest_missing(session, old)


@tag_app.command("delete")
def delete_tags(
    directory: Path = DIRECTORY_ARGUMENT,
    tags: str = typer.Argument(..., help="Tags (or a regex with --regex) to delete"),
    separator: Optional[str] = SEPARATOR_OPTION,
    use_regex: bool = REGEX_OPTION,
    ignore_case: bool = IGNORE_CASE_OPTION,
    dry_run: bool = DRY_RUN_OPTION,
    only: Optional[List[str]] = ONLY_OPTION,
    filter_text: Optional[str] = FILTER_OPTION,
    has_tag: Optional[str] = HAS_TAG_OPTION,
) -> None:
    """Delete TAGS from every caption in scope. A regex must match the whole tag."""

    def action(session: TagEditorSession, scope: ScopePredicate) -> TagChange:
        if use_regex:
            pattern = RegexOptions(pattern=tags, ignore_case=ignore_case)
            return session.delete_tags_matching(pattern, scope)
        return session.delete_tags(tags, scope)

    session, change = _run_edit(
        directory, separator, dry_run, "Delete Tags", action, only, filter_text, has_tag
    )
    if not use_regex and not change.changed_ids:
        _suggest_missing(session, tags)


@tag_app.command("move-front")
def move_tags_to_front(
    directory: Path = DIRECTORY_ARGUMENT,
    tags: str = typer.Argument(..., help="Tags to move, in their new order"),
    separator: Optional[str] = SEPARATOR_OPTION,
    dry_run: bool = DRY_RUN_OPTION,
    only: Optional[List[str]] = ONLY_OPTION,
    filter_text: Optional[str] = FILTER_OPTION,
    has_tag: Optional[str] = HAS_TAG_OPTION,
) -> None:
    """Move TAGS to the front of every caption in scope."""
    _run_edit(
        directory,
        separator,
        dry_run,
        "Move Tags to Front",
        lambda session, scope: session.move_tags_to_front(tags, scope),
        only,
        filter_text,
        has_tag,
    )


@tag_app.command("sort")
def sort_tags(
    directory: Path = DIRECTORY_ARGUMENT,
    by: TagSortMode = typer.Option(
        TagSortMode.ALPHABETICAL, "--by", help="Sort alphabetically or by frequency"
    ),
    keep_first: bool = KEEP_FIRST_OPTION,
    separator: Optional[str] = SEPARATOR_OPTION,
    dry_run: bool = DRY_RUN_OPTION,
    only: Optional[List[str]] = ONLY_OPTION,
    filter_text: Optional[str] = FILTER_OPTION,
    has_tag: Optional[str] = HAS_TAG_OPTION,
) -> None:
    """Sort the tags of every caption in scope."""

    def action(session: TagEditorSession, scope: ScopePredicate) -> TagChange:
        if by == TagSortMode.FREQUENCY:
            return session.sort_by_frequency(keep_first, scope)
        return session.sort_alphabetically(keep_first, scope)

    _run_edit(
        directory, separator, dry_run, "Sort Tags", action, only, filter_text, has_tag
    )


@tag_app.command("reverse")
def reverse_tags(
    directory: Path = DIRECTORY_ARGUMENT,
    keep_first: bool = KEEP_FIRST_OPTION,
    separator: Optional[str] = SEPARATOR_OPTION,
    dry_run: bool = DRY_RUN_OPTION,
    only: Optional[List[str]] = ONLY_OPTION,
    filter_text: Optional[str] = FILTER_OPTION,
    has_tag: Optional[str] = HAS_TAG_OPTION,
) -> None:
    """Reverse the tag order of every caption in scope."""
    _run_edit(
        directory,
        separator,
        dry_run,
        "Reverse Tags",
        lambda session, scope: session.reverse(keep_first, scope),
        only,
        filter_text,
        has_tag,
    )


@tag_app.command("shuffle")
def shuffle_tags(
    directory: Path = DIRECTORY_ARGUMENT,
    keep_first: bool = KEEP_FIRST_OPTION,
    seed: Optional[int] = typer.Option(
        None, "--seed", help="Seed for a reproducible shuffle"
    ),
    separator: Optional[str] = SEPARATOR_OPTION,
    dry_run: bool = DRY_RUN_OPTION,
    only: Optional[List[str]] = ONLY_OPTION,
    filter_text: Optional[str] = FILTER_OPTION,
    has_tag: Optional[str] = HAS_TAG_OPTION,
) -> None:
    """Shuffle the tags of every caption in scope."""
    rng = random.Random(seed).random if seed is not None else random.random
    _run_edit(
        directory,
        separator,
        dry_run,
        "Shuffle Tags",
        lambda session, scope: session.shuffle(keep_first, scope),
        only,
        filter_text,
        has_tag,
        rng=rng,
    )


@tag_app.command("dedupe")
def remove_duplicates(
    directory: Path = DIRECTORY_ARGUMENT,
    separator: Optional[str] = SEPARATOR_OPTION,
    dry_run: bool = DRY_RUN_OPTION,
    only: Optional[List[str]] = ONLY_OPTION,
    filter_text: Optional[str] = FILTER_OPTION,
    has_tag: Optional[str] = HAS_TAG_OPTION,
) -> None:
    """Remove repeated tags, keeping the first occurrence."""
    _run_edit(
        directory,
        separator,
        dry_run,
        "Remove Duplicate Tags",
        lambda session, scope: session.remove_duplicates(scope),
        only,
        filter_text,
        has_tag,
    )


@tag_app.command("clean")
def remove_empty(
    directory: Path = DIRECTORY_ARGUMENT,
    separator: Optional[str] = SEPARATOR_OPTION,
    dry_run: bool = DRY_RUN_OPTION,
    only: Optional[List[str]] = ONLY_OPTION,
    filter_text: Optional[str] = FILTER_OPTION,
    has_tag: Optional[str] = HAS_TAG_OPTION,
) -> None:
    """Remove empty and whitespace-only tags."""
    _run_edit(
        directory,
        separator,
        dry_run,
        "Remove Empty Tags",
        lambda session, scope: session.remove_empty(scope),
        only,
        filter_text,
        has_tag,
    )


@tag_app.command("replace")
def find_and_replace(
    directory: Path = DIRECTORY_ARGUMENT,
    find: str = typer.Argument(..., help="Text or pattern to find"),
    replace: str = typer.Argument(..., help="Replacement text"),
    separator: Optional[str] = SEPARATOR_OPTION,
    use_regex: bool = REGEX_OPTION,
    whole_tags: bool = typer.Option(
        False, "--whole-tags", "-w", help="Only replace tags that match entirely"
    ),
    ignore_case: bool = IGNORE_CASE_OPTION,
    dry_run: bool = DRY_RUN_OPTION,
    only: Optional[List[str]] = ONLY_OPTION,
    filter_text: Optional[str] = FILTER_OPTION,
    has_tag: Optional[str] = HAS_TAG_OPTION,
) -> None:
    """Replace FIND with REPLACE in caption text."""
    _run_edit(
        directory,
        separator,
        dry_run,
        "Find and Replace",
        lambda session, scope: session.find_and_replace(
            find,
            replace,
            use_regex=use_regex,
            whole_tags_only=whole_tags,
            ignore_case=ignore_case,
            scope=scope,
        ),
        only,
        filter_text,
        has_tag,
    )


@tag_app.command("prune")
def prune_abstract_tags(
    directory: Path = DIRECTORY_ARGUMENT,
    pair: Optional[List[str]] = typer.Option(
        None,
        "--pair",
        "-p",
        help=f"Pair written as 'abstract{PAIR_DELIMITER}concrete'; presets if omitted",
    ),
    separator: Optional[str] = SEPARATOR_OPTION,
    dry_run: bool = DRY_RUN_OPTION,
    only: Optional[List[str]] = ONLY_OPTION,
    filter_text: Optional[str] = FILTER_OPTION,
    has_tag: Optional[str] = HAS_TAG_OPTION,
) -> None:
    """Remove abstract tags from captions that also carry a concrete partner."""
    pairs = _parse_pairs(pair) if pair else None

    def action(session: TagEditorSession, scope: ScopePredicate) -> TagChange:
        if pairs is None:
            return session.apply_preset_pairs(scope)
        return session.remove_abstract_pairs(pairs, scope)

    action_name = "Remove Abstract Tags" if pairs else "Remove Abstract Tags (Presets)"
    _run_edit(
        directory, separator, dry_run, action_name, action, only, filter_text, has_tag
    )
