"""Adapters binding the meta-builder ports to the filesystem and processes."""
