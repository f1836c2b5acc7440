"""Core graph engine: model building, physics, view and interaction."""
