"""Packaged JSON schemas for nviz input files."""
