"""Design assembly: raw generator records to design documents."""

from .assembler import assemble_design
from .file_structure import build_file_structure, build_from_paths, build_from_text

__all__ = ["assemble_design", "build_file_structure", "build_from_paths", "build_from_text"]
