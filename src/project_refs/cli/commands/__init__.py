"""Command implementations for the project-refs CLI."""
