"""Export options and their on-disk (YAML/JSON) form."""

from __future__ import annotations

import dataclasses
import datetime as _dt
import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from meshstep.errors import ConfigError

DEFAULT_SCHEMA = 'CONFIG_CONTROL_DESIGN'
DEFAULT_FILE_NAME = 'model.step'

# SI prefixes accepted for the length unit; ``None`` means plain metres.
SI_PREFIXES = (
    'EXA', 'PETA', 'TERA', 'GIGA', 'MEGA', 'KILO', 'HECTO', 'DECA',
    'DECI', 'CENTI', 'MILLI', 'MICRO', 'NANO', 'PICO', 'FEMTO', 'ATTO',
)

_TEXT_FIELDS = ('name', 'description', 'file_name', 'author', 'organization', 'schema')


@dataclass(frozen=True)
class ExportOptions:
    """Caller-supplied constants for one STEP export.

    ``timestamp`` pins the ``FILE_NAME`` time stamp; when ``None`` the
    current UTC time is used, which is the only part of the output that
    varies between two exports of the same mesh.
    """

    name: str = 'meshstep_model'
    description: str = 'meshstep export'
    file_name: str = DEFAULT_FILE_NAME
    author: str = ''
    organization: str = ''
    schema: str = DEFAULT_SCHEMA
    length_unit: Optional[str] = 'MILLI'
    uncertainty: float = 1e-6
    timestamp: Optional[_dt.datetime] = None

    def __post_init__(self) -> None:
        for attr in _TEXT_FIELDS:
            value = getattr(self, attr)
            if not isinstance(value, str):
                raise ConfigError(f"{attr} must be a string, got {type(value).__name__}")
        if self.length_unit is not None and not isinstance(self.length_unit, str):
            raise ConfigError("length_unit must be a string or null")
        if self.length_unit is not None and self.length_unit not in SI_PREFIXES:
            raise ConfigError(f"unknown SI prefix for length unit: {self.length_unit!r}")
        if isinstance(self.uncertainty, bool) or not isinstance(self.uncertainty, (int, float)):
            raise ConfigError("uncertainty must be a number")
        if not self.uncertainty > 0.0:
            raise ConfigError("uncertainty must be positive")
        if not self.file_name:
            raise ConfigError("file_name must not be empty")
        if self.timestamp is not None and not isinstance(self.timestamp, _dt.datetime):
            raise ConfigError("timestamp must be a datetime or an ISO 8601 string")

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "ExportOptions":
        known = {f.name for f in dataclasses.fields(cls)}
        unknown = sorted(str(key) for key in set(data) - known)
        if unknown:
            raise ConfigError(f"unknown export option(s): {', '.join(unknown)}")
        values: Dict[str, Any] = dict(data)
        stamp = values.get('timestamp')
        if isinstance(stamp, str):
            try:
                values['timestamp'] = _dt.datetime.fromisoformat(stamp)
            except ValueError as exc:
                raise ConfigError(f"invalid timestamp: {stamp!r}") from exc
        if 'uncertainty' in values and not isinstance(values['uncertainty'], bool):
            try:
                values['uncertainty'] = float(values['uncertainty'])
            except (TypeError, ValueError) as exc:
                raise ConfigError(f"invalid uncertainty: {values['uncertainty']!r}") from exc
        return cls(**values)

    @classmethod
    def load(cls, path: Path | str) -> "ExportOptions":
        """Read options from a ``.json`` file or a YAML document."""

        config_path = Path(path)
        if not config_path.exists():
            raise FileNotFoundError(f"config not found: {config_path}")
        with config_path.open("r", encoding="utf-8") as fp:
            if config_path.suffix == ".json":
                try:
                    data = json.load(fp)
                except (json.JSONDecodeError, UnicodeDecodeError) as exc:
                    raise ConfigError(f"{config_path}: invalid JSON: {exc}") from exc
            else:
                import yaml  # local import to avoid hard dependency if unused
                try:
                    data = yaml.safe_load(fp) or {}
                except (yaml.YAMLError, UnicodeDecodeError) as exc:
                    raise ConfigError(f"{config_path}: invalid YAML: {exc}") from exc
        if not isinstance(data, dict):
            raise ConfigError(f"{config_path}: expected a mapping of export options")
        return cls.from_mapping(data)

    def replace(self, **overrides: Any) -> "ExportOptions":
        return dataclasses.replace(self, **overrides)

    def resolved_timestamp(self) -> _dt.datetime:
        if self.timestamp is not None:
            return self.timestamp
        return _dt.datetime.now(_dt.timezone.utc).replace(microsecond=0)


__all__ = ['DEFAULT_FILE_NAME', 'DEFAULT_SCHEMA', 'ExportOptions', 'SI_PREFIXES']
