"""Application layer: decorator registry, markers and the expansion services."""
