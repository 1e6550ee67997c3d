"""Originator settings used to stamp generated files."""
from __future__ import annotations

from dataclasses import dataclass, fields
from importlib import resources
from pathlib import Path
from typing import List, Mapping
import logging

import yaml

from .exceptions import ConfigurationError, SettingsValidationError
from .reference import ReferenceData
from .rules import BSB_PATTERN, is_digits, is_printable_ascii, parse_ddmmyy
from .utils import write_text

logger = logging.getLogger(__name__)

TEMPLATE_RESOURCE = "template.yaml"


@dataclass(frozen=True)
class OriginatorSettings:
    """The eight mandatory settings of an originator."""

    bank_code: str
    originator_name: str
    originator_id: str
    file_description: str
    settlement_date: str
    trace_bsb: str
    trace_account_number: str
    trace_account_name: str

    @classmethod
    def keys(cls) -> tuple[str, ...]:
        return tuple(f.name for f in fields(cls))

    @classmethod
    def from_mapping(cls, data: Mapping[str, object]) -> "OriginatorSettings":
        missing = [key for key in cls.keys() if key not in data]
        if missing:
            raise ConfigurationError(
                "Missing mandatory setting(s): " + ", ".join(missing),
                missing_keys=missing,
            )
        values = {}
        for key in cls.keys():
            value = data[key]
            if not isinstance(value, str):
                raise ConfigurationError(f"Setting '{key}' must be a plain value, not {type(value).__name__}")
            values[key] = value.strip()
        return cls(**values)

    def validate(self, reference: ReferenceData) -> List[str]:
        """Return one message per broken rule; an empty list means valid."""

        messages: List[str] = []
        if not 1 <= len(self.bank_code) <= 3 or not reference.is_bank_code(self.bank_code):
            messages.append(f"bank_code must be a known 3 character bank code, not '{self.bank_code}'")
        if not 1 <= len(self.originator_name) <= 26:
            messages.append("originator_name must be between 1 and 26 characters")
        if not (len(self.originator_id) <= 6 and is_digits(self.originator_id)):
            messages.append(f"originator_id must be 1 to 6 digits, not '{self.originator_id}'")
        if not 1 <= len(self.file_description) <= 12:
            messages.append("file_description must be between 1 and 12 characters")
        if parse_ddmmyy(self.settlement_date) is None:
            messages.append(f"settlement_date must be a valid date in DDMMYY format, not '{self.settlement_date}'")
        if not (BSB_PATTERN.match(self.trace_bsb) and reference.is_bsb(self.trace_bsb)):
            messages.append(f"trace_bsb must be a known BSB in XXX-XXX format, not '{self.trace_bsb}'")
        if not (len(self.trace_account_number) <= 9 and is_digits(self.trace_account_number.lstrip(" "))):
            messages.append(f"trace_account_number must be 1 to 9 digits, not '{self.trace_account_number}'")
        if not 1 <= len(self.trace_account_name) <= 16:
            messages.append("trace_account_name must be between 1 and 16 characters")
        for key in ("originator_name", "file_description", "trace_account_name"):
            if not is_printable_ascii(getattr(self, key)):
                messages.append(f"{key} must contain printable ASCII characters only")
        return messages


def parse_settings(text: str) -> OriginatorSettings:
    try:
        data = yaml.load(text, Loader=yaml.BaseLoader)
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Settings are not valid YAML: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigurationError("Settings must be a mapping of key: value pairs")
    return OriginatorSettings.from_mapping(data)


def load_settings(path: Path) -> OriginatorSettings:
    """Read an originator settings file, every value kept as a string."""

    path = Path(path).expanduser()
    logger.info("Loading originator settings from %s", path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigurationError(f"Unable to read settings file {path}: {exc}") from exc
    return parse_settings(text)


def validate_settings(settings: OriginatorSettings, reference: ReferenceData) -> OriginatorSettings:
    messages = settings.validate(reference)
    if messages:
        for message in messages:
            logger.error("Settings: %s", message)
        raise SettingsValidationError(messages)
    return settings


def template_text() -> str:
    return resources.files("cemtexer").joinpath("data").joinpath(TEMPLATE_RESOURCE).read_text(encoding="utf-8")


def write_template(path: Path) -> Path:
    path = Path(path).expanduser()
    try:
        write_text(path, template_text())
    except OSError as exc:
        raise ConfigurationError(f"Unable to write settings template to {path}: {exc}") from exc
    logger.info("Settings template written to %s", path)
    return path


__all__ = [
    "OriginatorSettings",
    "load_settings",
    "parse_settings",
    "template_text",
    "validate_settings",
    "write_template",
]
