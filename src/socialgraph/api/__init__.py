"""HTTP API for socialgraph."""
