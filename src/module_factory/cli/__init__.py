"""CLI package for module-factory."""
