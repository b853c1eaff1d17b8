"""Lexing stage: source text to positioned tokens."""
