"""EatRite: AI-assisted recipe generation."""

__version__ = "1.0.0"
