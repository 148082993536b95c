"""ISO 10303-21 exchange structure: header, data section and trailer."""

from __future__ import annotations

import datetime as _dt
from typing import Iterable, List, Optional

from meshstep import __version__
from meshstep.config import ExportOptions
from meshstep.serializer import format_string

TOOL_NAME = 'meshstep'
IMPLEMENTATION_LEVEL = '2;1'


def _timestamp_text(stamp: _dt.datetime) -> str:
    return stamp.replace(microsecond=0).isoformat()


def render_header(options: ExportOptions, timestamp: Optional[_dt.datetime] = None) -> List[str]:
    """Return the ``HEADER`` section lines, including ``ISO-10303-21;``."""

    stamp = timestamp if timestamp is not None else options.resolved_timestamp()
    system = f"{TOOL_NAME} {__version__}"
    return [
        "ISO-10303-21;",
        "HEADER;",
        f"FILE_DESCRIPTION(({format_string(options.description)}),"
        f"{format_string(IMPLEMENTATION_LEVEL)});",
        "FILE_NAME("
        + ",".join([
            format_string(options.file_name),
            format_string(_timestamp_text(stamp)),
            f"({format_string(options.author)})",
            f"({format_string(options.organization)})",
            format_string(system),
            format_string(TOOL_NAME),
            format_string(''),
        ])
        + ");",
        f"FILE_SCHEMA(({format_string(options.schema)}));",
        "ENDSEC;",
    ]


def assemble(header: Iterable[str], entity_lines: Iterable[str]) -> str:
    lines = list(header)
    lines.append("DATA;")
    lines.extend(entity_lines)
    lines.append("ENDSEC;")
    lines.append("END-ISO-10303-21;")
    return "\n".join(lines) + "\n"


__all__ = ['IMPLEMENTATION_LEVEL', 'TOOL_NAME', 'assemble', 'render_header']
