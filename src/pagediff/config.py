"""Comparison parameters shared by every stage of the pipeline."""
from __future__ import annotations

import os
from dataclasses import dataclass, fields, replace
from typing import Dict, Mapping, Optional

from .errors import ConfigurationError

DPI_RANGE = (1, 2400)
TOLERANCE_RANGE = (0, 255)

ENV_PREFIX = "PAGEDIFF_"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off", ""}


@dataclass(frozen=True)
class ToleranceConfig:
    """Parameters driving rasterization, pixel comparison and output."""

    dpi: int = 300
    channel_tolerance: int = 0
    grayscale: bool = False
    mark_differences: bool = False
    skip_identical: bool = False

    def validate(self) -> "ToleranceConfig":
        low, high = DPI_RANGE
        if not low <= self.dpi <= high:
            raise ConfigurationError(f"Invalid dpi: {self.dpi}. Valid range is {low}-{high}")
        low, high = TOLERANCE_RANGE
        if not low <= self.channel_tolerance <= high:
            raise ConfigurationError(
                f"Invalid channel-tolerance: {self.channel_tolerance}. "
                f"Valid range is {low}(default, exact matching)-{high}"
            )
        return self

    @property
    def scale(self) -> float:
        """Zoom factor from PDF points to raster pixels."""
        return self.dpi / 72.0

    def to_dict(self) -> Dict[str, object]:
        return {
            "dpi": self.dpi,
            "channel_tolerance": self.channel_tolerance,
            "grayscale": self.grayscale,
            "mark_differences": self.mark_differences,
            "skip_identical": self.skip_identical,
        }

    def copy(self, **overrides: object) -> "ToleranceConfig":
        return replace(self, **overrides)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ToleranceConfig":
        """Build a validated config from ``PAGEDIFF_*`` environment variables.

        Unset variables keep the dataclass defaults. ``PAGEDIFF_DPI=150``
        becomes ``dpi=150``, boolean flags accept ``1/0``, ``true/false``,
        ``yes/no`` and ``on/off``.
        """

        environ = os.environ if environ is None else environ
        values: Dict[str, object] = {}
        for field in fields(cls):
            raw = environ.get(ENV_PREFIX + field.name.upper())
            if raw is None:
                continue
            if field.type in (bool, "bool"):
                values[field.name] = _parse_bool(field.name, raw)
            else:
                values[field.name] = _parse_int(field.name, raw)
        return cls(**values).validate()


def _parse_int(name: str, raw: str) -> int:
    try:
        return int(raw.strip())
    except ValueError as exc:
        raise ConfigurationError(f"{ENV_PREFIX}{name.upper()} must be an integer, got {raw!r}") from exc


def _parse_bool(name: str, raw: str) -> bool:
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ConfigurationError(f"{ENV_PREFIX}{name.upper()} must be a boolean, got {raw!r}")
