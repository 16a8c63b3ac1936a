"""Command line interface for keysieve."""
