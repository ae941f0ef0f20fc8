"""Core layer - domain enums and settings."""
