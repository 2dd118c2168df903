"""Error taxonomy components; import from ``base.errors`` for the stable surface."""
