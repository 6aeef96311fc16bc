"""
WING Insight Backend

Keyword graph sentiment scoring and technical indicator routing.
"""

__version__ = "0.1.0"
