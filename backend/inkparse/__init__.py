"""Inkparse: handwritten notes and agent prompts to structured documents."""

__version__ = "0.1.0"
