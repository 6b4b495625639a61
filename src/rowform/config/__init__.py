"""Configuration: models, discovery, settings, logging."""
