"""Reusable patterns for building API verticals.

Holds the generic async repository layer that each vertical subclasses
with its own queries.
"""
