"""HTTP API for Diablock sessions."""
