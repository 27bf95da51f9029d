"""LLM-backed content generation."""

from testgen.generation.generator import ContentGenerator, SourceFile, parse_summaries, strip_code_fences

__all__ = [
    "ContentGenerator",
    "SourceFile",
    "parse_summaries",
    "strip_code_fences",
]
