"""Internal implementation package; import from ``quadtri`` instead."""
