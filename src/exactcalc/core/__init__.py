"""Core expression parsing and evaluation."""
