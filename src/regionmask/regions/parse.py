"""
DS9 region descriptor parsing.

Turns the line-oriented text emitted by DS9 (``regions -format ds9``) into
an ordered list of Region records. Shared defaults come from ``global``
lines; a region line may override them in its trailing comment.

Example input::

    # Region file format: DS9 version 4.1
    global color=green width=1 font="helvetica 10 normal roman"
    image
    circle(100,100,20) # color=red
    -box(100,100,10,6,30)
    point(50,50) # point=x
"""

import re

from pydantic import ValidationError

from regionmask.models import Region, ShapeKind
from regionmask.tracer import get_tracer, trace


SUPPORTED_SHAPES = frozenset(kind.value for kind in ShapeKind)

_REGION_RE = re.compile(r"^\s*(-?)([A-Za-z_]\w*)\(([^)]*)\)\s*(?:#(.*))?$")
_PROPERTY_RE = re.compile(r"\b(\w+)=(\w+(?:\.\w+)?)\b")


class ParsedRegions:
    """Regions parsed from one descriptor text, with the unknown shapes seen."""

    def __init__(self, regions=None, unknown_shapes=None, defaults=None):
        self.regions = regions if regions is not None else []
        self.unknown_shapes = unknown_shapes if unknown_shapes is not None else set()
        self.defaults = defaults if defaults is not None else {}

    def __len__(self):
        return len(self.regions)

    def __iter__(self):
        return iter(self.regions)


def parse_value(text):
    """Coerce a property value: int first, then float, else the raw string."""
    try:
        return int(text)
    except ValueError:
        pass
    try:
        return float(text)
    except ValueError:
        return text


def parse_properties(text):
    """
    Extract key=value tokens from a global line or a region comment.

    Values such as ``text={a b}`` or quoted fonts do not match the token
    pattern and are ignored.
    """
    return {key: parse_value(value) for key, value in _PROPERTY_RE.findall(text or "")}


def parse_region_line(line, defaults=None):
    """
    Parse a single region line.

    Returns a (shape_name, region) tuple:
    - (None, None) when the line is not a region line at all
    - (name, None) when the shape keyword is unsupported or the line is malformed
    - (name, Region) for a valid region
    """
    match = _REGION_RE.match(line)
    if match is None:
        return None, None

    sign, name, coord_text, comment = match.groups()
    shape_name = f"{sign}{name}"

    if name not in SUPPORTED_SHAPES:
        return shape_name, None

    try:
        coordinates = [float(v) for v in coord_text.split(",")]
    except ValueError:
        get_tracer().event(f"Skipping malformed region line: {line.strip()}", level="DEBUG")
        return shape_name, None

    properties = dict(defaults or {})
    properties.update(parse_properties(comment))

    try:
        region = Region(
            kind=ShapeKind(name),
            inclusion=(sign != "-"),
            coordinates=coordinates,
            properties=properties,
        )
    except ValidationError as e:
        get_tracer().event(
            f"Skipping malformed region line: {line.strip()}",
            level="DEBUG",
            errors=e.error_count(),
        )
        return shape_name, None

    return shape_name, region


@trace(label="parse_regions")
def parse_regions(text):
    """
    Parse DS9 descriptor text into regions.

    Args:
        text: raw multi-line descriptor text

    Returns:
        ParsedRegions with regions in input order, the set of unsupported
        shape keywords (as written, including a leading '-') and the
        accumulated global defaults
    """
    tracer = get_tracer()

    parsed = ParsedRegions()

    for line in text.splitlines():
        if line.startswith("global "):
            parsed.defaults.update(parse_properties(line[len("global "):]))
            continue

        shape_name, region = parse_region_line(line, parsed.defaults)
        if region is not None:
            parsed.regions.append(region)
        elif shape_name is not None and shape_name.lstrip("-") not in SUPPORTED_SHAPES:
            parsed.unknown_shapes.add(shape_name)

    tracer.event(
        f"Parsed {len(parsed.regions)} regions",
        unknown=len(parsed.unknown_shapes),
        defaults=parsed.defaults,
    )

    return parsed
