"""Core framework: configuration and plugins."""
