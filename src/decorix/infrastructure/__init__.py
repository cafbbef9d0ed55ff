"""Infrastructure: AST utilities, name resolution and code emission helpers."""
