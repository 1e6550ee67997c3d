"""Static lookup tables for bank codes and BSB numbers."""
from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from importlib import resources
from pathlib import Path
from typing import Iterable, Optional
import logging

logger = logging.getLogger(__name__)

INSTITUTIONS_RESOURCE = "institutions.txt"
BSB_RESOURCE = "bsb.txt"


@dataclass(frozen=True)
class ReferenceData:
    """Immutable sets of known bank codes and BSB numbers."""

    bank_codes: frozenset[str]
    bsb_codes: frozenset[str]

    def is_bank_code(self, value: str) -> bool:
        return value in self.bank_codes

    def is_bsb(self, value: str) -> bool:
        return value in self.bsb_codes


def parse_table(lines: Iterable[str]) -> frozenset[str]:
    """Collect the first column of every non-comment line.

    Plain one-code-per-line lists and CSV exports (``"062-000","CBA",...``)
    are both accepted.
    """

    codes: set[str] = set()
    for raw in lines:
        line = raw.strip()
        if not line or line.startswith("#"):
            continue
        code = line.split(",", 1)[0].strip().strip('"').strip()
        if code:
            codes.add(code)
    return frozenset(codes)


def _read_table(path: Optional[Path], resource: str) -> frozenset[str]:
    if path is None:
        text = resources.files("cemtexer").joinpath("data").joinpath(resource).read_text(encoding="utf-8")
        source = f"bundled {resource}"
    else:
        text = Path(path).expanduser().read_text(encoding="utf-8")
        source = str(path)
    table = parse_table(text.splitlines())
    logger.debug("Loaded %d codes from %s", len(table), source)
    return table


@lru_cache(maxsize=None)
def load_reference_data(
    institutions_path: Optional[Path] = None,
    bsb_path: Optional[Path] = None,
) -> ReferenceData:
    """Load the lookup tables once per process (per distinct path pair)."""

    return ReferenceData(
        bank_codes=_read_table(institutions_path, INSTITUTIONS_RESOURCE),
        bsb_codes=_read_table(bsb_path, BSB_RESOURCE),
    )


__all__ = ["ReferenceData", "load_reference_data", "parse_table"]
