"""Core shared primitives.

This module holds configuration, errors, logging, and typed models
shared by the migration, validation, ingest, and store layers.
"""
