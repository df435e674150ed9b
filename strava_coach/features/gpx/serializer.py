"""
GPX 1.1 serializer.

Writes a planned route as a GPX document with one track and one segment.
The layout is fixed line by line: the output is uploaded to Strava as is
and compared verbatim in tests, so no XML library is involved in writing.
"""

from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional, Sequence

from strava_coach.config import settings

from .schemas import GPXMetadata, GPXTrackPoint


GPX_NAMESPACE = "http://www.topografix.com/GPX/1/1"
XSI_NAMESPACE = "http://www.w3.org/2001/XMLSchema-instance"
GPX_SCHEMA_LOCATION = f"{GPX_NAMESPACE} http://www.topografix.com/GPX/1/1/gpx.xsd"

# Substrings every generated document contains
REQUIRED_MARKERS = (
    '<?xml version="1.0"',
    "<gpx",
    "<trk>",
    "<trkseg>",
    "<trkpt",
)

# & must go first, or the other entities would be escaped twice
_XML_ESCAPES = (
    ("&", "&amp;"),
    ("<", "&lt;"),
    (">", "&gt;"),
    ('"', "&quot;"),
    ("'", "&apos;"),
)


def escape_xml(text: str) -> str:
    """Escape the five XML special characters."""
    for char, entity in _XML_ESCAPES:
        text = text.replace(char, entity)
    return text


def format_number(value: float) -> str:
    """
    Shortest text for a coordinate or elevation.

    Whole numbers drop the fractional part (35.0 -> '35'); other values
    use the shortest round-trip digits in positional notation
    (48.8566 -> '48.8566', -5e-05 -> '-0.00005'). GPX coordinates are
    xsd:decimal, which has no exponent form.
    """
    if float(value).is_integer():
        return str(int(value))
    return format(Decimal(repr(float(value))), "f")


def utc_timestamp(moment: Optional[datetime] = None) -> str:
    """ISO-8601 UTC time with milliseconds, e.g. '2024-01-01T12:00:00.000Z'."""
    moment = moment or datetime.now(timezone.utc)
    return moment.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def generate_gpx(
    track_points: Sequence[GPXTrackPoint],
    metadata: GPXMetadata,
    creator: Optional[str] = None,
) -> str:
    """
    Serialize track points to a GPX 1.1 document.

    Args:
        track_points: Ordered points; elevation is written only when set
        metadata: Name, optional description, author and time
        creator: `creator` attribute; defaults to settings.gpx_creator

    Returns:
        GPX document text ending with a newline
    """
    creator = creator or settings.gpx_creator
    timestamp = metadata.time or utc_timestamp()
    name = escape_xml(metadata.name)
    description = escape_xml(metadata.description) if metadata.description else ""
    author = escape_xml(metadata.author or settings.gpx_creator)

    lines = [
        '<?xml version="1.0" encoding="UTF-8"?>',
        f'<gpx version="1.1" creator="{escape_xml(creator)}" '
        f'xmlns="{GPX_NAMESPACE}" xmlns:xsi="{XSI_NAMESPACE}" '
        f'xsi:schemaLocation="{GPX_SCHEMA_LOCATION}">',
    ]

    # Metadata
    lines.append("  <metadata>")
    lines.append(f"    <name>{name}</name>")
    if description:
        lines.append(f"    <desc>{description}</desc>")
    lines.append(f"    <author><name>{author}</name></author>")
    lines.append(f"    <time>{timestamp}</time>")
    lines.append("  </metadata>")

    # Track
    lines.append("  <trk>")
    lines.append(f"    <name>{name}</name>")
    if description:
        lines.append(f"    <desc>{description}</desc>")
    lines.append("    <trkseg>")

    for point in track_points:
        lines.append(
            f'      <trkpt lat="{format_number(point.lat)}" lon="{format_number(point.lng)}">'
        )
        if point.elevation is not None:
            lines.append(f"        <ele>{format_number(point.elevation)}</ele>")
        lines.append("      </trkpt>")

    lines.append("    </trkseg>")
    lines.append("  </trk>")
    lines.append("</gpx>")

    return "\n".join(lines) + "\n"


def validate_gpx(text: str) -> bool:
    """
    Cheap structural check before upload.

    Only looks for the required markers; this is not schema validation.
    """
    return all(marker in text for marker in REQUIRED_MARKERS)
