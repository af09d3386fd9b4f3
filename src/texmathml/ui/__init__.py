"""User-facing interfaces for texmathml."""
