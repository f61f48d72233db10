"""
Fetching, parsing and formatting helpers shared by the extractors.
"""
