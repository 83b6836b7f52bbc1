"""Mood Tracker HTTP API."""
