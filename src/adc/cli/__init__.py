"""Command line interface for the disk cache."""
