"""HTTP API for the impact analysis core."""
