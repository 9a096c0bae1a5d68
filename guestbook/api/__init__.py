"""
HTTP endpoints.
"""
