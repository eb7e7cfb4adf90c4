"""Core sync engine: models, normalization, reconciliation, diff and deploy."""
