"""Persistence for world files."""
