"""Domain layer - value objects, entities, ports and exceptions for artwork."""
