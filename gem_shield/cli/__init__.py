"""Command line interface for GemShield."""
