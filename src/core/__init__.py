"""Core: configuration, domain models, interfaces and workflows."""
