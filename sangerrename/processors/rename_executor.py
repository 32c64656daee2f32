"""Apply a confirmed rename batch to the filesystem."""

import logging
import os
from pathlib import Path

from sangerrename.display import printable
from sangerrename.exceptions import CollisionError, FilesystemError
from sangerrename.models.rename import OutcomeStatus, RenameBatch, RenameEntry, RenameOutcome


logger = logging.getLogger(__name__)


class RenameExecutor:
    """Renames files one entry at a time, never overwriting existing files."""

    def execute(self, batch: RenameBatch) -> list[RenameOutcome]:
        """Apply every entry of a batch.

        Each entry is attempted independently: a skipped or failed file does not
        stop the rest of the batch, and renames that already happened are kept.

        Args:
            batch: Confirmed rename plan.

        Returns:
            One outcome per entry, in batch order.
        """
        outcomes = [self._execute_entry(entry) for entry in batch.entries]

        renamed = sum(1 for outcome in outcomes if outcome.status is OutcomeStatus.RENAMED)
        logger.info("Renamed %d of %d file(s)", renamed, len(outcomes))
        return outcomes

    def _execute_entry(self, entry: RenameEntry) -> RenameOutcome:
        source, target = entry.source_path, entry.target_path

        if source == target:
            logger.info("Skipping %s: already standardized", printable(str(source)))
            return RenameOutcome(
                source_path=source,
                target_path=target,
                status=OutcomeStatus.SKIPPED,
                reason="already standardized",
            )

        try:
            self._rename(entry)
        except CollisionError:
            logger.warning("Skipping %s: target %s exists", printable(str(source)), printable(target.name))
            return RenameOutcome(
                source_path=source,
                target_path=target,
                status=OutcomeStatus.SKIPPED,
                reason="target exists",
            )
        except FilesystemError as e:
            logger.error("Failed to rename %s: %s", printable(str(source)), printable(e.reason))
            return RenameOutcome(
                source_path=source,
                target_path=target,
                status=OutcomeStatus.FAILED,
                reason=e.reason,
            )

        logger.info("Renamed %s -> %s", printable(str(source)), printable(target.name))
        return RenameOutcome(source_path=source, target_path=target, status=OutcomeStatus.RENAMED)

    def _rename(self, entry: RenameEntry) -> None:
        """Rename a single file without ever replacing an existing name.

        The source is hard linked to the target and then unlinked, so an existing
        target (a dangling symlink included) makes the OS refuse the link. Where
        hard links are not available the rename falls back to a checked
        ``Path.rename``.

        Raises:
            CollisionError: If the target already exists.
            FilesystemError: If the source is missing or the OS refuses the rename.
        """
        source, target = entry.source_path, entry.target_path

        if not source.exists():
            raise FilesystemError(source, "source file not found")
        if source.is_symlink():
            self._checked_rename(source, target)
            return

        try:
            os.link(source, target)
        except FileExistsError as e:
            raise CollisionError(target) from e
        except OSError as e:
            logger.debug("Hard link unavailable for %s (%s), renaming instead", printable(str(source)), e.strerror)
            self._checked_rename(source, target)
            return

        try:
            source.unlink()
        except OSError as e:
            # Drop the new link so the file keeps its original name only
            target.unlink(missing_ok=True)
            raise FilesystemError(source, e.strerror or str(e)) from e

    def _checked_rename(self, source: Path, target: Path) -> None:
        if os.path.lexists(target):
            raise CollisionError(target)
        try:
            source.rename(target)
        except OSError as e:
            raise FilesystemError(source, e.strerror or str(e)) from e
