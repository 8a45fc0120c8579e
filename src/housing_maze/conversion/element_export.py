"""
Element coordinate export.

Export generated element positions in formats for:
- the coordinate list in the main window
- JSON for external tools
- CSV for analysis/spreadsheets

MakePlace format scales by 100, swaps Y and Z and rounds to integers.
"""

import csv
import io
import json
from typing import Dict, Iterable, List, Sequence, Tuple

from housing_maze.generators.maze.maze_types import ElementKind

COORDINATE_PRECISION = 2


def coordinate_strings(position: Sequence[float], makeplace: bool = False) -> Tuple[str, str, str]:
    x, y, z = (float(v) for v in position)
    if makeplace:
        return f"{x * 100:.0f}", f"{z * 100:.0f}", f"{y * 100:.0f}"
    p = COORDINATE_PRECISION
    return f"{x:.{p}f}", f"{y:.{p}f}", f"{z:.{p}f}"


def format_element_coordinates(elements: Iterable, makeplace: bool = False) -> List[str]:
    """One `Point N: (x, y, z)` line per element, numbered from 1."""
    return [
        f"Point {i}: ({', '.join(coordinate_strings(element.position, makeplace))})"
        for i, element in enumerate(elements, start=1)
    ]


def export_elements_to_json(elements: Iterable) -> str:
    """
    Export elements as JSON.

    Returns:
        JSON string with kind, position, rotation and size per element
    """
    output = []
    for element in elements:
        output.append({
            'kind': str(element.kind),
            'position': {
                'x': float(element.position[0]),
                'y': float(element.position[1]),
                'z': float(element.position[2]),
            },
            'rotation_y': float(element.rotation_y),
            'dimensions': list(element.dimensions),
        })
    return json.dumps(output, indent=2)


def export_elements_to_csv(elements: Iterable, makeplace: bool = False) -> str:
    """
    Export element positions as CSV.

    Returns:
        CSV with a `Point,X,Y,Z` header
    """
    output = io.StringIO()
    writer = csv.writer(output, lineterminator='\n')
    writer.writerow(['Point', 'X', 'Y', 'Z'])
    for i, element in enumerate(elements, start=1):
        writer.writerow([f"Point {i}", *coordinate_strings(element.position, makeplace)])
    return output.getvalue()


def count_elements_by_kind(elements: Iterable) -> Dict[str, int]:
    counts = {kind.value: 0 for kind in ElementKind}
    for element in elements:
        counts[element.kind.value] += 1
    return counts
