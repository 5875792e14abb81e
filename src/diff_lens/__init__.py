"""Diff-lens: unified diff analysis for AI-assisted pull request review."""

__version__ = "0.1.0"
