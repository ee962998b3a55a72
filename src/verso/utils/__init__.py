"""Small shared utilities with no dependencies on the rest of Verso."""
