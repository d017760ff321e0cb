"""create-destino: interactive scaffolder for destino server projects."""

__version__ = "1.0.0"
