"""Evaluator helper modules for the Y runtime."""

__all__ = [
    "control",
    "expr",
    "fn",
    "helpers",
    "index",
    "literals",
    "loops",
    "macros",
    "mutation",
    "yolo",
]
