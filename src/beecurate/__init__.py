"""Deterministic curation of seven-letter daily puzzles from a dictionary."""
