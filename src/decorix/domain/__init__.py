"""Domain layer: value objects and exceptions of the expansion pass."""
