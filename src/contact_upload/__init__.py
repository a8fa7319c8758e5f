"""
Contact CSV upload service.
"""

__version__ = "0.1.0"
