"""Bundled data files for mini-tmpfiles."""
