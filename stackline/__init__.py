"""Stackline: collaborative research projects, stacks and chat."""

__version__ = "0.1.0"
