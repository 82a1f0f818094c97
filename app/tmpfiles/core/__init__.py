"""Core services: configuration discovery and loading, settings, paths, theming."""
