"""Multi-account administration console for a hosted identity platform."""

__version__ = "1.0.0"
