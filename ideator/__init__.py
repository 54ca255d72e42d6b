"""Content Ideator: trend discovery and AI asset production service."""
