"""
API Mindmap: graph extraction from a web API's routes and an ORM's schema.
"""

__version__ = "0.1.0"
