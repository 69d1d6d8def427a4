"""CLI module for KITT."""
