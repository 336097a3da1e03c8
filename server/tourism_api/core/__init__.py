"""Configuration, database, errors and observability plumbing."""
