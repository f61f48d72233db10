"""
Notecard - URL metadata extraction for a personal bookmarking dashboard.
"""

__version__ = "1.0.0"
