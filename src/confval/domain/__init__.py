"""Domain layer: field kinds, failure kinds, and value coercion.

This layer depends only on stdlib.
It must never import from validation, services, commands, or config.
"""
