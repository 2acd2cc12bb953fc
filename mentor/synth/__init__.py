"""
Synthesis: prompt composition, model invocation and structured extraction.
"""

from .extract import Extraction, extract_json, parse_structured, strip_fences
from .invoker import SynthesisInvoker
from .prompts import SCHEMA_VERSION, build_curate_prompt, build_plan_prompt, format_excerpts

__all__ = [
    "Extraction",
    "extract_json",
    "parse_structured",
    "strip_fences",
    "SynthesisInvoker",
    "SCHEMA_VERSION",
    "build_curate_prompt",
    "build_plan_prompt",
    "format_excerpts",
]
