"""Application layer: operation catalog, text pipeline and ports."""
