"""Validation engine: registry, rules, descriptors, walker, and errors.

May import from the domain layer only.
"""
