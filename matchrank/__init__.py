"""Matching and ranking engine for jobs and social feed content."""

__version__ = "0.1.0"
