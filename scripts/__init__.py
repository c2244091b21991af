"""
Operational scripts for the ebook store.
"""
