"""Preset configuration loading."""
