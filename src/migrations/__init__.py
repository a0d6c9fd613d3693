"""Mission schema migrations.

This module holds the ordered registry of generation-tagged steps and
the runner that upgrades in-flight mission documents to the latest shape.
"""
