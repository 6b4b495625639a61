"""Service layer: form controller and submission coordinator."""
