"""Mission persistence layer.

This package defines the stored mission schema, persists missions with a
catalog index, seeds default missions, and exposes the Python SDK.
"""
