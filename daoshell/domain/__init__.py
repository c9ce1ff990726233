"""Domain layer: symbols, events, interfaces, routing and pure services."""
