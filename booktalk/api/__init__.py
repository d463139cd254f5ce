"""
HTTP layer: authentication, validation, error handling and routes.
"""
