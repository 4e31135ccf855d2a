"""
apiforest - cross-reference resolution and hierarchy building for API docs
"""

__version__ = "0.1.0"
