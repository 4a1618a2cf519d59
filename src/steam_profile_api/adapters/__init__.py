"""Hosting-platform entry points."""
