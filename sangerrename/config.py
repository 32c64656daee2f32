"""Settings passed into the interactive workflow."""

from dataclasses import dataclass, field
from datetime import date

from sangerrename.exceptions import ValidationError
from sangerrename.models.extraction import Vendor
from sangerrename.processors.vendor_registry import DEFAULT_SAMPLE_SIZE


@dataclass
class RenameConfig:
    """Everything the workflow would otherwise read from the environment.

    ``today`` is the date offered by default at the date step. Keeping it here
    rather than calling ``date.today()`` inside the workflow keeps runs reproducible.
    """

    today: date
    vendor: Vendor | None = None
    sample_size: int = DEFAULT_SAMPLE_SIZE
    primer_aliases: dict[str, str] = field(default_factory=dict)


def parse_alias(text: str) -> tuple[str, str]:
    """Parse an ``OLD=NEW`` primer alias.

    Raises:
        ValidationError: If either side is missing.
    """
    old, sep, new = text.partition("=")
    old, new = old.strip(), new.strip()
    if not sep or not old or not new:
        raise ValidationError(f"Alias must look like OLD=NEW, got '{text}'")
    return old, new
