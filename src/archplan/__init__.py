"""Normalise generator design output into design documents and task lists."""

from .design.assembler import assemble_design
from .generation import GenerationResult, run_generation_cycle
from .planning.tasks import build_task_list

__all__ = ["GenerationResult", "assemble_design", "build_task_list", "run_generation_cycle"]

__version__ = "0.1.0"
