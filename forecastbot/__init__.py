"""IRC weather bot: postal codes in, current conditions out."""

__version__ = "1.0.0"
