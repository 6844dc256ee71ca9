"""Command line interface for the meta-builder."""
