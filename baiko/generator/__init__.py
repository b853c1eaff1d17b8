"""JavaScript code generation from the Baiko AST."""
