"""Mood tracker server packages."""
