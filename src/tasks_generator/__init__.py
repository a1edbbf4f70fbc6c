"""Tasks Generator - rule-based backlog generation from a project description."""

__version__ = "0.1.0"
