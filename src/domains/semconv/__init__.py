"""Metric constant catalog generation from semantic convention registries."""
