"""Goose Hacknight key gateway"""

__version__ = "1.0.0"
