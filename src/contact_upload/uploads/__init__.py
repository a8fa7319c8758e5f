"""
Contact file uploads: directory store, service and HTTP routes.
"""
