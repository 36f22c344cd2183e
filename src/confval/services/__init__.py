"""Service layer: CLI-facing operations returning ServiceResult.

Services may import from domain and validation layers.
They must never import from commands or output.
"""
