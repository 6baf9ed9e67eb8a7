"""Core engine for depsight.

Manifest reading, version ordering, settings, and the inventory engine.
"""
