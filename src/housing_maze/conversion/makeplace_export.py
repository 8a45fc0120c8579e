"""
Housing design export.

Places a copy of an uploaded furniture design on every generated wall and
floor plate, producing a design file the housing tool can import.

Housing space is Z-up and measured in centimetres, so element positions are
scaled by 100 with Y and Z swapped. Walls are turned a quarter turn further
to line up with the housing tool's item orientation.
"""

import copy
import json
import logging
import math
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Sequence

from housing_maze.generators.maze.maze_types import ElementKind

logger = logging.getLogger(__name__)

MAX_DESIGN_FILE_BYTES = 10 * 1024 * 1024
WORLD_TO_HOUSING = 100.0
JSON_INDENT = 2


class DesignFileError(ValueError):
    """An uploaded design file is unusable."""


def validate_design(data: Any, label: str = "JSON file") -> Dict[str, Any]:
    """Check the structure of a parsed design.

    Raises:
        DesignFileError: Not an object, or missing `name` or `transform`
    """
    if not isinstance(data, dict):
        raise DesignFileError(f"{label} must contain a JSON object")
    if not data.get('name'):
        raise DesignFileError(f"{label} must contain a 'name' property")
    if not data.get('transform'):
        raise DesignFileError(f"{label} must contain a 'transform' property")
    return data


def load_design_file(path, label: str = "JSON file") -> Dict[str, Any]:
    """Read and validate a design file.

    Raises:
        DesignFileError: Wrong extension, too large, unreadable or invalid
    """
    path = Path(path)
    if path.suffix.lower() != '.json':
        raise DesignFileError("Please upload a JSON file")
    try:
        size = path.stat().st_size
    except OSError as e:
        raise DesignFileError(f"Cannot read {path.name}: {e}") from e
    if size > MAX_DESIGN_FILE_BYTES:
        raise DesignFileError("File size must be less than 10MB")

    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise DesignFileError(f"Invalid JSON file: {e.msg}") from e
    except OSError as e:
        raise DesignFileError(f"Cannot read {path.name}: {e}") from e

    validate_design(data, label)
    logger.info("Loaded design '%s' from %s", data['name'], path)
    return data


def to_housing_location(position: Sequence[float]) -> List[float]:
    """Scene (x, y, z) to housing [x, z, y] in centimetres."""
    x, y, z = (float(v) for v in position)
    return [x * WORLD_TO_HOUSING, z * WORLD_TO_HOUSING, y * WORLD_TO_HOUSING]


def wall_rotation(rotation_y: float) -> List[float]:
    """Quaternion [x, y, z, w] for an element's vertical-axis rotation."""
    angle = rotation_y + math.pi / 2
    return [0.0, 0.0, math.sin(angle / 2), math.cos(angle / 2)]


def rotate_quaternion(q: Sequence[float], angle: float) -> List[float]:
    """Compose quaternion q with a rotation of `angle` about the vertical axis (q * r)."""
    x, y, z, w = (float(v) for v in q)
    s = math.sin(angle / 2)
    c = math.cos(angle / 2)
    return [
        x * c + y * s,
        -x * s + y * c,
        z * c + w * s,
        w * c - z * s,
    ]


def _place_nested(template: Dict[str, Any], target: Dict[str, Any],
                  position: Sequence[float], rotation_y: float):
    nested = template.get('attachments') or []
    if not nested:
        return

    origin = template['transform'].get('location', [0.0, 0.0, 0.0])
    base = to_housing_location(position)
    c = math.cos(rotation_y)
    s = math.sin(rotation_y)
    target['attachments'] = []

    for attachment in nested:
        transform = attachment.get('transform') if isinstance(attachment, dict) else None
        if not transform or 'location' not in transform:
            logger.warning("Skipping attachment without a transform in '%s'",
                           template.get('name'))
            continue

        rel = [transform['location'][i] - origin[i] for i in range(3)]
        placed = copy.deepcopy(attachment)
        placed['transform'] = dict(transform)
        placed['transform']['location'] = [
            base[0] + rel[0] * c - rel[1] * s,
            base[1] + rel[0] * s + rel[1] * c,
            base[2] + rel[2],
        ]
        if 'rotation' in transform:
            placed['transform']['rotation'] = rotate_quaternion(transform['rotation'], rotation_y)
        target['attachments'].append(placed)


def process_design(elements: Iterable, design: Dict[str, Any],
                   floor_design: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Attach a copy of `design` to every wall and floor element.

    Args:
        elements: Scene elements from a maze engine
        design: Uploaded design used for walls (and floors without a floor design)
        floor_design: Optional design used for floor plates

    Returns:
        New design dict: the uploaded design without its transform, plus
        one attachment per element

    Raises:
        DesignFileError: No elements to place
    """
    validate_design(design)
    if floor_design is not None:
        validate_design(floor_design, "Floor JSON file")

    placeable = [e for e in elements if e.kind is not ElementKind.MARKER]
    if not placeable:
        raise DesignFileError("Please generate points first.")

    processed = copy.deepcopy(design)
    processed.pop('transform', None)
    processed['attachments'] = []

    for element in placeable:
        template = design
        if element.kind is ElementKind.FLOOR and floor_design is not None:
            template = floor_design

        attachment = copy.deepcopy(template)
        attachment.pop('attachments', None)
        attachment['transform'] = {
            'location': to_housing_location(element.position),
            'rotation': wall_rotation(element.rotation_y),
            'scale': copy.deepcopy(template['transform'].get('scale')),
        }
        _place_nested(template, attachment, element.position, element.rotation_y)
        processed['attachments'].append(attachment)

    logger.info("Processed design '%s' with %d attachments",
                processed.get('name'), len(processed['attachments']))
    return processed


def output_filename(design_name: str, shape_type: str) -> str:
    """`<name>_<ShapeType>.json` with the shape type's first letter upper-cased."""
    type_name = shape_type[:1].upper() + shape_type[1:]
    return f"{design_name or 'design'}_{type_name}.json"


def write_processed_design(processed: Dict[str, Any], directory, shape_type: str) -> Path:
    """Write a processed design next to the other exports.

    Returns:
        Path of the written file
    """
    directory = Path(directory)
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / output_filename(processed.get('name', 'design'), shape_type)
    with open(path, 'w', encoding='utf-8') as f:
        json.dump(processed, f, indent=JSON_INDENT)
    logger.info("Wrote %s", path)
    return path
