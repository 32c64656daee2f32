"""Rename plan data models."""

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator

from sangerrename.dates import parse_yymmdd
from sangerrename.exceptions import ValidationError
from sangerrename.models.extraction import Vendor


FORBIDDEN_CHARACTERS = (".", "/", "\\")


def validate_component(value: str, label: str) -> str:
    """Normalize one component of a standardized filename.

    Surrounding whitespace is stripped. The result must be non-empty and must not
    contain a dot (the component separator) or a path separator.

    Raises:
        ValidationError: If the value cannot be used as a filename component.
    """
    value = value.strip()
    if not value:
        raise ValidationError(f"{label} must not be empty")
    for character in FORBIDDEN_CHARACTERS:
        if character in value:
            raise ValidationError(f"{label} '{value}' must not contain '{character}'")
    return value


def standardized_name(date: str, template: str, primer: str, extension: str = "") -> str:
    """Join components into ``YYMMDD.TEMPLATE.PRIMER.ext``."""
    parts = [date, template, primer]
    if extension:
        parts.append(extension)
    return ".".join(parts)


class RenameEntry(BaseModel):
    """A confirmed rename of a single file. Immutable once built."""

    model_config = ConfigDict(frozen=True)

    source_path: Path = Field(description="File to rename")
    vendor: Vendor
    template: str = Field(description="Final template name")
    primer: str = Field(description="Final primer name")
    date: str = Field(description="Final date in YYMMDD form")
    extension: str = Field(default="", description="Extension without the leading dot")

    @field_validator("template")
    @classmethod
    def _check_template(cls, value: str) -> str:
        return validate_component(value, "Template")

    @field_validator("primer")
    @classmethod
    def _check_primer(cls, value: str) -> str:
        return validate_component(value, "Primer")

    @field_validator("date")
    @classmethod
    def _check_date(cls, value: str) -> str:
        value = value.strip()
        parse_yymmdd(value)
        return value

    @field_validator("extension")
    @classmethod
    def _check_extension(cls, value: str) -> str:
        if "/" in value or "\\" in value:
            raise ValidationError(f"Extension '{value}' must not contain a path separator")
        return value

    @property
    def target_name(self) -> str:
        """Standardized filename: ``YYMMDD.TEMPLATE.PRIMER.ext``."""
        return standardized_name(self.date, self.template, self.primer, self.extension)

    @property
    def target_path(self) -> Path:
        return self.source_path.parent / self.target_name

    def __str__(self) -> str:
        return f"RenameEntry('{self.source_path.name}' -> '{self.target_name}')"


class RenameBatch(BaseModel):
    """Ordered rename plan for one invocation, one entry per input file."""

    model_config = ConfigDict(frozen=True)

    entries: tuple[RenameEntry, ...] = Field(default_factory=tuple)

    def __len__(self) -> int:
        return len(self.entries)


class OutcomeStatus(str, Enum):
    RENAMED = "renamed"
    SKIPPED = "skipped"
    FAILED = "failed"


class RenameOutcome(BaseModel):
    """What happened to one entry of a rename batch."""

    source_path: Path
    target_path: Path
    status: OutcomeStatus
    reason: str = Field(default="", description="Why the file was skipped or failed")

    def __str__(self) -> str:
        suffix = f", reason='{self.reason}'" if self.reason else ""
        return f"RenameOutcome('{self.source_path.name}' -> '{self.target_path.name}', {self.status.value}{suffix})"
