"""Workflows: linear sequences of awaited automation and AI calls."""
