"""Monthly compensation engine: scoring, pool distribution and period lifecycle."""

__version__ = "0.1.0"
