"""Command line interface for locha."""
