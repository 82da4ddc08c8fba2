"""Batch inference adapters."""
