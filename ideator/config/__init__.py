"""Prompt, schema and localization configuration."""
