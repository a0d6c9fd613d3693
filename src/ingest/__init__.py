"""Mission file import.

This package collects mission files, runs each one through parsing,
envelope checks, migration, and validation, and coordinates batches of
imports against the mission store.
"""
