"""Bundled data files for depsight."""
