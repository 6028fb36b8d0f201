"""Recipe to technical sheet (ficha técnica) converter."""

__version__ = "1.0.0"
