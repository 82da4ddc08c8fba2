"""HTTP read interface."""
