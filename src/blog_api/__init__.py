"""
Blog post CRUD API backed by a document store
"""

__version__ = "1.0.0"
