"""Plugins shipped with clipsan and registered by default."""
