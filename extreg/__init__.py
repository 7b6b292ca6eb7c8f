"""Extension Registry — submission validation, review, and catalog."""

__version__ = "0.1.0"
