"""Vendor lookup and detection."""

import logging
from pathlib import Path

from sangerrename.exceptions import ConfigurationError
from sangerrename.models.extraction import Confidence, ExtractionResult, Vendor
from sangerrename.processors.vendor_patterns import PATTERNS, VendorPattern


logger = logging.getLogger(__name__)

DEFAULT_SAMPLE_SIZE = 5


class VendorRegistry:
    """Ordered set of vendor patterns with Manual as the fallback."""

    def __init__(self, patterns: dict[Vendor, VendorPattern] | None = None) -> None:
        """Initialize the registry.

        Args:
            patterns: Mapping of vendor to parse function. Insertion order is the
                      tie-break order for detection. Defaults to the built-in patterns.
        """
        self.patterns = dict(PATTERNS if patterns is None else patterns)

    def pattern_for(self, vendor: Vendor) -> VendorPattern:
        """Return the parse function registered for ``vendor``.

        Raises:
            ConfigurationError: If the vendor has no registered pattern.
        """
        try:
            return self.patterns[vendor]
        except KeyError as e:
            name = getattr(vendor, "value", vendor)
            raise ConfigurationError(f"No filename pattern registered for vendor '{name}'") from e

    def parse(self, path: Path, vendor: Vendor) -> ExtractionResult:
        return self.pattern_for(vendor)(path)

    def detect(self, paths: list[Path], sample_size: int = DEFAULT_SAMPLE_SIZE) -> Vendor:
        """Suggest the vendor whose convention best fits a batch.

        The first ``sample_size`` files are parsed with every registered vendor
        except Manual. Vendors are ranked by their number of exact matches, then
        partial matches; ties go to the earlier registered vendor. Manual is
        returned when no vendor matched anything.

        Args:
            paths: Files of the batch.
            sample_size: How many files to inspect.

        Returns:
            Suggested vendor. The caller is expected to let the user override it.
        """
        sample = paths[: max(sample_size, 1)]
        best_vendor = Vendor.MANUAL
        best_score = (0, 0)

        for vendor, pattern in self.patterns.items():
            if vendor is Vendor.MANUAL:
                continue

            confidences = [pattern(path).confidence for path in sample]
            score = (confidences.count(Confidence.EXACT), confidences.count(Confidence.PARTIAL))
            logger.debug("Detection score for %s: %d exact, %d partial", vendor.label, *score)

            if score > best_score:
                best_vendor, best_score = vendor, score

        logger.info("Suggested vendor: %s", best_vendor.label)
        return best_vendor
