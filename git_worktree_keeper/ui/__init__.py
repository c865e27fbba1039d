"""Textual user interface components."""
