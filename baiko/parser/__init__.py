"""Parsing stage: tokens to the Program AST."""
