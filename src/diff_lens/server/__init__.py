"""Diff-lens HTTP server module."""
