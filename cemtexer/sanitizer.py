"""Decode raw ABA files before structural validation."""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import List
import logging

from .utils import (
    IssueSeverity,
    SectionReport,
    ValidationIssue,
    compute_status,
    detect_newline,
    ensure_ascii,
    strip_bom,
)

logger = logging.getLogger(__name__)


@dataclass
class SanitizeResult:
    """Outcome of the sanitization pipeline."""

    section: SectionReport
    lines: list[str]
    newline: str
    offending_codepoints: list[int]


def split_records(text: str) -> list[str]:
    """Split on LF or CRLF, keeping empty lines but not the final line break."""

    lines = text.replace("\r\n", "\n").split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    return lines


class Sanitizer:
    """Turn raw bytes into one-byte-per-character record lines."""

    def sanitize(self, file_path: Path) -> SanitizeResult:
        file_path = Path(file_path).expanduser().resolve()
        logger.info("Reading ABA file %s", file_path)

        try:
            raw_bytes = file_path.read_bytes()
        except OSError as exc:
            issue = ValidationIssue(
                severity=IssueSeverity.CRITICAL,
                message=f"Unable to read file: {exc}",
            )
            section = SectionReport(status=compute_status([issue]), issues=[issue])
            return SanitizeResult(section=section, lines=[], newline="NONE", offending_codepoints=[])

        return self.sanitize_bytes(raw_bytes)

    def sanitize_bytes(self, raw_bytes: bytes) -> SanitizeResult:
        issues: List[ValidationIssue] = []
        newline = detect_newline(raw_bytes)

        if b"\x00" in raw_bytes:
            issues.append(
                ValidationIssue(
                    severity=IssueSeverity.CRITICAL,
                    message="Null bytes found in file",
                )
            )

        stripped_bytes = strip_bom(raw_bytes)
        if stripped_bytes is not raw_bytes:
            logger.warning("UTF-8 BOM removed")
            issues.append(
                ValidationIssue(
                    severity=IssueSeverity.WARNING,
                    message="UTF-8 BOM removed automatically",
                )
            )

        # latin-1 maps every byte, so decoding cannot fail
        decoded = stripped_bytes.decode("latin-1")

        ascii_text, offending = ensure_ascii(decoded)
        if offending:
            logger.warning("%d non-ASCII character(s) replaced with '?'", len(offending))
            issues.append(
                ValidationIssue(
                    severity=IssueSeverity.WARNING,
                    message="Characters outside the ASCII range replaced with '?'",
                )
            )

        lines: list[str]
        if newline == "NONE":
            lines = [ascii_text] if ascii_text else []
        else:
            lines = split_records(ascii_text)

        if not lines:
            issues.append(
                ValidationIssue(
                    severity=IssueSeverity.CRITICAL,
                    message="File contains no records",
                )
            )

        section = SectionReport(status=compute_status(issues), issues=issues)
        return SanitizeResult(section=section, lines=lines, newline=newline, offending_codepoints=offending)


__all__ = ["SanitizeResult", "Sanitizer", "split_records"]
