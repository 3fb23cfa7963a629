"""Commit history page: view state, formatting, theme and page routes."""
