"""Structural integrity validation for migrated missions."""
