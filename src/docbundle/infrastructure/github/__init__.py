"""GitHub repository host adapter."""
