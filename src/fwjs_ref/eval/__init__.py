"""Evaluator helper modules for the FWJS runtime."""

__all__ = [
    "bind",
    "common",
    "control",
    "expr",
    "fn",
]
