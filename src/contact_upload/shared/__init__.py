"""
Shared infrastructure: logging, correlation IDs and domain exceptions.
"""
