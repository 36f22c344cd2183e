"""Configuration layer: CLI settings and logging setup."""
