"""Configuration defaults and validated settings."""
