"""Adapters to the outside world (automation library, OpenAI, HTTP, files)."""
