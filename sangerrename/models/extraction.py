"""Vendor tags and the per-file extraction result produced by vendor patterns."""

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field, model_validator

from sangerrename.exceptions import ConfigurationError


class Vendor(str, Enum):
    """Sequencing vendor whose naming convention applies to a file."""

    SANGON = "sangon"
    RUIBIO = "ruibio"
    GENEWIZ = "genewiz"
    MANUAL = "manual"

    @property
    def label(self) -> str:
        return self.value.capitalize()

    @classmethod
    def from_name(cls, name: str) -> "Vendor":
        """Look up a vendor by name, ignoring case.

        Raises:
            ConfigurationError: If no vendor has that name.
        """
        try:
            return cls(name.strip().lower())
        except ValueError as e:
            raise ConfigurationError(f"Unknown vendor: {name}") from e

    @classmethod
    def known(cls) -> list["Vendor"]:
        """Vendors with a real parsing rule, in detection order."""
        return [vendor for vendor in cls if vendor is not cls.MANUAL]


class Confidence(str, Enum):
    """How far an extraction can be trusted without user correction."""

    EXACT = "exact"
    PARTIAL = "partial"
    UNKNOWN = "unknown"

    @property
    def rank(self) -> int:
        return {Confidence.EXACT: 2, Confidence.PARTIAL: 1, Confidence.UNKNOWN: 0}[self]


class ExtractionResult(BaseModel):
    """What a vendor pattern could read from one filename.

    Fields that could not be located are left blank for the user to fill in.
    After creation only the interactive workflow changes it.
    """

    source_path: Path = Field(description="Path of the file as given on the command line")
    vendor: Vendor = Field(description="Vendor whose pattern produced this result")
    template: str = Field(default="", description="Template (sample / plasmid) name")
    primer: str = Field(default="", description="Sequencing primer name")
    date: str | None = Field(default=None, description="Date in YYMMDD form, if the filename carries one")
    extension: str = Field(default="", description="File extension without the leading dot, original case")
    confidence: Confidence = Field(default=Confidence.UNKNOWN)
    vendor_id: str = Field(default="", description="Vendor order/sample code or plate well id")
    notes: list[str] = Field(default_factory=list, description="Why confidence was degraded")

    @model_validator(mode="after")
    def _exact_requires_both_names(self) -> "ExtractionResult":
        if self.confidence is Confidence.EXACT and not (self.template and self.primer):
            raise ValueError("An exact extraction must have both a template and a primer")
        return self

    @property
    def filename(self) -> str:
        return self.source_path.name

    @property
    def is_complete(self) -> bool:
        return bool(self.template) and bool(self.primer)

    def __str__(self) -> str:
        return (
            f"ExtractionResult('{self.filename}', vendor={self.vendor.label}, template='{self.template}', "
            f"primer='{self.primer}', confidence={self.confidence.value})"
        )
