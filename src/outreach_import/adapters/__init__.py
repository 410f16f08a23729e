"""Adapters binding the import pipeline ports to concrete infrastructure."""
