"""
Hierarchical clustering and principal component analysis of talk tags.
"""

__version__ = "0.1.0"
