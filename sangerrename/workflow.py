"""Interactive session that turns a batch of vendor files into a confirmed rename plan."""

import logging
import os
from collections import Counter
from collections.abc import Callable
from datetime import date
from enum import Enum
from pathlib import Path

from rich.markup import escape
from rich.table import Table

from sangerrename.config import RenameConfig
from sangerrename.dates import format_yymmdd, is_valid_yymmdd, parse_yymmdd, resolve_date_input
from sangerrename.display import display_name, printable
from sangerrename.exceptions import ValidationError, WorkflowCancelled
from sangerrename.models.extraction import Confidence, ExtractionResult, Vendor
from sangerrename.models.rename import RenameBatch, RenameEntry, validate_component
from sangerrename.processors.vendor_registry import VendorRegistry
from sangerrename.prompter import Prompter


logger = logging.getLogger(__name__)

CANCEL_CHOICE = "cancel"
CONFIRM_CHOICES = ["yes", "no", CANCEL_CHOICE]
DATE_HINT = "YYMMDD, 'today' or a shift such as +1d / -1w / +1m"

CONFIDENCE_STYLES = {
    Confidence.EXACT: "green",
    Confidence.PARTIAL: "yellow",
    Confidence.UNKNOWN: "red",
}


class WorkflowState(str, Enum):
    SELECT_VENDOR = "select_vendor"
    EDIT_TEMPLATE_PRIMER = "edit_template_primer"
    SELECT_DATE = "select_date"
    CONFIRM = "confirm"
    DONE = "done"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return self in (WorkflowState.DONE, WorkflowState.CANCELLED)


def extraction_table(results: list[ExtractionResult]) -> Table:
    """Table of what was extracted from each file, colored by confidence."""
    table = Table(show_header=True, header_style="bold", title="Extracted names")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Original", style="cyan")
    table.add_column("Vendor")
    table.add_column("Template", style="green")
    table.add_column("Primer", style="green")
    table.add_column("Confidence", justify="right")
    table.add_column("Notes", style="dim")

    for index, result in enumerate(results, start=1):
        style = CONFIDENCE_STYLES[result.confidence]
        table.add_row(
            str(index),
            escape(display_name(result.source_path)),
            result.vendor.label,
            escape(printable(result.template)) or "[red]<missing>[/red]",
            escape(printable(result.primer)) or "[red]<missing>[/red]",
            f"[{style}]{result.confidence.value}[/{style}]",
            escape(printable("; ".join(result.notes))),
        )

    return table


class RenameWorkflow:
    """State machine driving one interactive renaming session.

    States run in the order SELECT_VENDOR, EDIT_TEMPLATE_PRIMER, SELECT_DATE,
    CONFIRM and end in DONE. Rejecting the plan at CONFIRM goes back to
    EDIT_TEMPLATE_PRIMER. Any prompt may raise WorkflowCancelled, which moves the
    session to CANCELLED and discards everything collected so far. Nothing here
    touches the filesystem beyond checking whether targets already exist.
    """

    def __init__(
        self,
        paths: list[Path],
        prompter: Prompter,
        config: RenameConfig,
        registry: VendorRegistry | None = None,
    ) -> None:
        """Initialize the workflow.

        Args:
            paths: Files of the batch, in presentation order.
            prompter: Terminal I/O used for every question.
            config: Session settings (default date, vendor preselection, aliases).
            registry: Vendor patterns. Defaults to the built-in registry.
        """
        self.paths = list(paths)
        self.prompter = prompter
        self.config = config
        self.registry = registry or VendorRegistry()

        self.state = WorkflowState.SELECT_VENDOR
        self.results: list[ExtractionResult] = []
        self.dates: list[str] = []
        self.batch: RenameBatch | None = None

        self._handlers: dict[WorkflowState, Callable[[], WorkflowState]] = {
            WorkflowState.SELECT_VENDOR: self._select_vendor,
            WorkflowState.EDIT_TEMPLATE_PRIMER: self._edit_template_primer,
            WorkflowState.SELECT_DATE: self._select_date,
            WorkflowState.CONFIRM: self._confirm,
        }

    def run(self) -> RenameBatch | None:
        """Step until DONE or CANCELLED.

        Returns:
            The confirmed batch, or None if the user cancelled.
        """
        while not self.state.is_terminal:
            self.step()
        return self.batch

    def step(self) -> WorkflowState:
        """Run the current state's prompts and move to the next state."""
        if self.state.is_terminal:
            return self.state

        previous = self.state
        try:
            self.state = self._handlers[self.state]()
        except WorkflowCancelled:
            self.cancel()
        logger.debug("Workflow %s -> %s", previous.value, self.state.value)
        return self.state

    def cancel(self) -> None:
        """Abandon the session without renaming anything."""
        logger.info("Workflow cancelled in state %s", self.state.value)
        self.state = WorkflowState.CANCELLED
        self.results = []
        self.dates = []
        self.batch = None

    # Vendor selection

    def _ask_vendor(self, prompt: str, default: Vendor) -> Vendor:
        choices = [vendor.value for vendor in Vendor] + [CANCEL_CHOICE]
        answer = self.prompter.choice(prompt, choices, default=default.value)
        if answer.lower() == CANCEL_CHOICE:
            raise WorkflowCancelled("Cancelled at vendor selection")
        return Vendor.from_name(answer)

    def _select_vendor(self) -> WorkflowState:
        suggestion = self.config.vendor or self.registry.detect(self.paths, self.config.sample_size)
        self.prompter.show(
            f"Found [bold cyan]{len(self.paths)}[/bold cyan] file(s). "
            f"Suggested vendor: [bold magenta]{suggestion.label}[/bold magenta]"
        )

        batch_vendor = self._ask_vendor("Vendor", suggestion)
        vendors = [batch_vendor] * len(self.paths)

        if len(self.paths) > 1 and self.prompter.confirm("Override the vendor for individual files?", default=False):
            vendors = [self._ask_vendor(f"Vendor for {display_name(path)}", batch_vendor) for path in self.paths]

        self.results = [self.registry.parse(path, vendor) for path, vendor in zip(self.paths, vendors)]
        self._apply_primer_aliases()
        return WorkflowState.EDIT_TEMPLATE_PRIMER

    def _apply_primer_aliases(self) -> None:
        for result in self.results:
            alias = self.config.primer_aliases.get(result.primer)
            if alias:
                logger.debug(
                    "Primer alias %s -> %s for %s",
                    printable(result.primer),
                    printable(alias),
                    display_name(result.source_path),
                )
                result.primer = alias

    # Template / primer editing

    def _ask_component(self, prompt: str, label: str, current: str) -> str:
        while True:
            value = self.prompter.text(prompt, default=current)
            try:
                return validate_component(value, label)
            except ValidationError as e:
                self.prompter.error(str(e))
                current = ""

    def _all_exact(self) -> bool:
        for result in self.results:
            if result.confidence is not Confidence.EXACT:
                return False
            try:
                validate_component(result.template, "Template")
                validate_component(result.primer, "Primer")
            except ValidationError:
                return False
        return True

    def _edit_template_primer(self) -> WorkflowState:
        self.prompter.show(extraction_table(self.results))

        if self._all_exact() and self.prompter.confirm("Accept all extracted names?", default=True):
            return WorkflowState.SELECT_DATE

        total = len(self.results)
        for index, result in enumerate(self.results, start=1):
            self.prompter.show(f"[bold]{index}/{total}[/bold] [cyan]{escape(display_name(result.source_path))}[/cyan]")
            result.template = self._ask_component("  Template", "Template", result.template)

            old_primer = result.primer
            result.primer = self._ask_component("  Primer", "Primer", result.primer)
            if old_primer and result.primer != old_primer:
                self._offer_primer_rename(result, old_primer)

        return WorkflowState.SELECT_DATE

    def _offer_primer_rename(self, edited: ExtractionResult, old_primer: str) -> None:
        others = [result for result in self.results if result is not edited and result.primer == old_primer]
        if not others:
            return
        if self.prompter.confirm(
            f"  Also rename primer '{old_primer}' to '{edited.primer}' in {len(others)} other file(s)?",
            default=True,
        ):
            for result in others:
                result.primer = edited.primer

    # Date selection

    def _default_date(self, result: ExtractionResult | None = None) -> date:
        if result is not None and result.date and is_valid_yymmdd(result.date):
            return parse_yymmdd(result.date)

        carried = {r.date for r in self.results}
        if len(carried) == 1:
            only = carried.pop()
            if only and is_valid_yymmdd(only):
                return parse_yymmdd(only)
        return self.config.today

    def _ask_date(self, prompt: str, default: date) -> str:
        while True:
            text = self.prompter.text(f"{prompt} ({DATE_HINT})", default=format_yymmdd(default))
            try:
                return format_yymmdd(resolve_date_input(text, base=default, today=self.config.today))
            except ValidationError as e:
                self.prompter.error(str(e))

    def _select_date(self) -> WorkflowState:
        if len(self.results) > 1 and not self.prompter.confirm("Use the same date for all files?", default=True):
            self.dates = [
                self._ask_date(f"Date for {display_name(result.source_path)}", self._default_date(result))
                for result in self.results
            ]
        else:
            chosen = self._ask_date("Date", self._default_date())
            self.dates = [chosen] * len(self.results)
        return WorkflowState.CONFIRM

    # Confirmation

    def preview_table(self) -> Table:
        """Old name -> new name for the whole batch, flagging clashes.

        Built from the same entries that confirmation hands to the executor, so the
        names shown are the names written.
        """
        entries = self._entries()
        repeats = Counter(entry.target_path for entry in entries)

        table = Table(show_header=True, header_style="bold", title="Proposed renames")
        table.add_column("Original", style="cyan")
        table.add_column("New Name", style="green")
        table.add_column("Note")

        for entry in entries:
            target = entry.target_path
            if target == entry.source_path:
                note = "[dim]unchanged[/dim]"
            elif os.path.lexists(target):
                note = "[red]target exists, will be skipped[/red]"
            elif repeats[target] > 1:
                note = "[yellow]duplicate name in batch[/yellow]"
            else:
                note = ""
            table.add_row(escape(display_name(entry.source_path)), escape(display_name(target)), note)

        return table

    def _confirm(self) -> WorkflowState:
        self.prompter.show(self.preview_table())

        answer = self.prompter.choice("Apply these renames?", CONFIRM_CHOICES).lower()
        if answer == CANCEL_CHOICE:
            raise WorkflowCancelled("Cancelled at confirmation")
        if answer != "yes":
            return WorkflowState.EDIT_TEMPLATE_PRIMER

        self.batch = self._build_batch()
        return WorkflowState.DONE

    def _entries(self) -> tuple[RenameEntry, ...]:
        return tuple(
            RenameEntry(
                source_path=result.source_path,
                vendor=result.vendor,
                template=result.template,
                primer=result.primer,
                date=self.dates[index],
                extension=result.extension,
            )
            for index, result in enumerate(self.results)
        )

    def _build_batch(self) -> RenameBatch:
        return RenameBatch(entries=self._entries())
