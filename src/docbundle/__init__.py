"""docbundle - documentation ingestion, preset bundles and distillation."""

__version__ = "0.1.0"
