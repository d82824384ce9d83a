"""Command line interface for inspecting resolved configuration."""
