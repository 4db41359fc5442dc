"""Minimal web application boilerplate: one templated page, a favicon and static assets."""

__version__ = "0.1.0"
