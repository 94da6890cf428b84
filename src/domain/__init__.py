"""Domain models for pool snapshots.

This package contains in-memory (Pydantic) models describing pool outputs and
pool history entries as normalized from indexer responses. They are
independent from any indexer payload shape so adapters can evolve without
leaking provider-specific fields.
"""

__all__ = [
    "constants",
    "pool",
]
