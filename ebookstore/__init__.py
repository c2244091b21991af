"""
Ebook store: creation pipeline for digital-product records.
"""

__version__ = "1.0.0"
