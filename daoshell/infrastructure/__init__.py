"""Infrastructure layer: adapters, monitoring and persistence."""
