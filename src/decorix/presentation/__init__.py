"""Presentation layer: import hook and pytest plugin."""
