"""
Export package.

Writes generated mazes out as housing designs, JSON or CSV.
"""

from .element_export import (
    export_elements_to_json,
    export_elements_to_csv,
    format_element_coordinates,
    count_elements_by_kind,
)
from .makeplace_export import (
    DesignFileError,
    load_design_file,
    process_design,
    write_processed_design,
)

__all__ = [
    'export_elements_to_json',
    'export_elements_to_csv',
    'format_element_coordinates',
    'count_elements_by_kind',
    'DesignFileError',
    'load_design_file',
    'process_design',
    'write_processed_design',
]
