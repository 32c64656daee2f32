"""Per-vendor filename parsing rules.

Each pattern is a pure function from a path to an ExtractionResult. Patterns never
raise: when a filename does not follow the vendor's convention the result carries
blank fields and a lower confidence so the user can complete it interactively.
"""

import re
from collections.abc import Callable
from pathlib import Path

from sangerrename.models.extraction import Confidence, ExtractionResult, Vendor


VendorPattern = Callable[[Path], ExtractionResult]

# 0001_31225060307072_(TXPCR)_[SP1]
SANGON_PATTERN = re.compile(r"^(?P<index>\d+)_(?P<code>[^_]+)_\((?P<template>[^()]*)\)_\[(?P<primer>[^\[\]]*)\]$")
SANGON_TEMPLATE = re.compile(r"\(([^()]*)\)")
SANGON_PRIMER = re.compile(r"\[([^\[\]]*)\]")

RUIBIO_SEGMENTS = 4

# Plate well such as A01 or H12, appended by Genewiz after the last underscore
GENEWIZ_WELL_ID = re.compile(r"^[A-Z]\d{2}$")


def split_filename(path: Path) -> tuple[str, str]:
    """Split a path's name into stem and extension (without dot, original case)."""
    name = path.name
    suffix = path.suffix
    if not suffix:
        return name, ""
    return name[: -len(suffix)], suffix[1:]


def _result(path: Path, vendor: Vendor, **fields) -> ExtractionResult:
    _, extension = split_filename(path)
    return ExtractionResult(source_path=path, vendor=vendor, extension=extension, **fields)


def _with_dot_check(result: ExtractionResult) -> ExtractionResult:
    # Dots would add components to the standardized name
    dotted = [label for label, value in (("template", result.template), ("primer", result.primer)) if "." in value]
    if not dotted:
        return result
    notes = result.notes + [f"Extracted {label} contains a dot" for label in dotted]
    confidence = Confidence.PARTIAL if result.confidence is Confidence.EXACT else result.confidence
    return result.model_copy(update={"confidence": confidence, "notes": notes})


def parse_sangon(path: Path) -> ExtractionResult:
    """Parse ``<index>_<sampleCode>_(<template>)_[<primer>].<ext>``."""
    stem, _ = split_filename(path)

    match = SANGON_PATTERN.match(stem)
    if match and match.group("template").strip() and match.group("primer").strip():
        return _with_dot_check(
            _result(
                path,
                Vendor.SANGON,
                template=match.group("template").strip(),
                primer=match.group("primer").strip(),
                vendor_id=match.group("code"),
                confidence=Confidence.EXACT,
            )
        )

    template_match = SANGON_TEMPLATE.search(stem)
    primer_match = SANGON_PRIMER.search(stem)
    template = template_match.group(1).strip() if template_match else ""
    primer = primer_match.group(1).strip() if primer_match else ""

    if not template and not primer:
        return _result(
            path,
            Vendor.SANGON,
            confidence=Confidence.UNKNOWN,
            notes=["No (template) or [primer] group found"],
        )

    notes = ["Filename does not follow the Sangon layout"]
    if not template:
        notes.append("No (template) group found")
    if not primer:
        notes.append("No [primer] group found")

    parts = stem.split("_")
    vendor_id = parts[1] if len(parts) >= 2 else ""

    return _with_dot_check(
        _result(
            path,
            Vendor.SANGON,
            template=template,
            primer=primer,
            vendor_id=vendor_id,
            confidence=Confidence.PARTIAL,
            notes=notes,
        )
    )


def parse_ruibio(path: Path) -> ExtractionResult:
    """Parse ``<template>.<subcode>.<numericId>.<primer>.<ext>``."""
    stem, _ = split_filename(path)
    segments = [segment.strip() for segment in stem.split(".")]

    if len(segments) != RUIBIO_SEGMENTS:
        return _result(
            path,
            Vendor.RUIBIO,
            confidence=Confidence.UNKNOWN,
            notes=[f"Expected {RUIBIO_SEGMENTS} dot-separated parts, found {len(segments)}"],
        )
    if not all(segments):
        return _result(path, Vendor.RUIBIO, confidence=Confidence.UNKNOWN, notes=["Empty dot-separated part"])

    template, _subcode, numeric_id, primer = segments
    return _result(
        path,
        Vendor.RUIBIO,
        template=template,
        primer=primer,
        vendor_id=numeric_id,
        confidence=Confidence.EXACT,
    )


def parse_genewiz(path: Path) -> ExtractionResult:
    """Parse ``<template>-<primer>_<wellId>.<ext>``.

    Genewiz mixes hyphens and underscores freely, so the result is never better
    than Partial:

        TL1-T25_A01   -> template "TL1",  primer "T25",  well "A01"
        k1-2-C1_R_G04 -> template "k1-2", primer "C1_R", well "G04"
    """
    stem, _ = split_filename(path)
    if "-" not in stem and "_" not in stem:
        return _result(
            path,
            Vendor.GENEWIZ,
            confidence=Confidence.UNKNOWN,
            notes=["No '-' or '_' separators found"],
        )

    notes = ["Genewiz separators are unreliable; please check"]

    body, well_id = stem, ""
    head, sep, tail = stem.rpartition("_")
    if sep and GENEWIZ_WELL_ID.match(tail):
        body, well_id = head, tail
    else:
        notes.append("No well id suffix found")

    left, sep, right = body.partition("_")
    # Last hyphen, so hyphenated templates such as k1-2 stay whole
    template, dash, primer = left.rpartition("-")
    if not dash:
        template, primer = left, ""
    if sep:
        primer = f"{primer}_{right}" if primer else right
    template = template.strip()
    primer = primer.strip(" _")

    if not (template and primer):
        if not template and not primer:
            return _result(path, Vendor.GENEWIZ, vendor_id=well_id, confidence=Confidence.UNKNOWN, notes=notes)
        notes.append("Could not separate template from primer")

    return _with_dot_check(
        _result(
            path,
            Vendor.GENEWIZ,
            template=template,
            primer=primer,
            vendor_id=well_id,
            confidence=Confidence.PARTIAL,
            notes=notes,
        )
    )


def parse_manual(path: Path) -> ExtractionResult:
    """No parsing: every field is left for the user."""
    return _result(path, Vendor.MANUAL, confidence=Confidence.UNKNOWN)


PATTERNS: dict[Vendor, VendorPattern] = {
    Vendor.SANGON: parse_sangon,
    Vendor.RUIBIO: parse_ruibio,
    Vendor.GENEWIZ: parse_genewiz,
    Vendor.MANUAL: parse_manual,
}
