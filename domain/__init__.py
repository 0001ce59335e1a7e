"""Domain layer: export jobs, site builds and bundling."""
