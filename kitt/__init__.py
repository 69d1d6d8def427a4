"""KITT - personal assistant webhook adapter for a local knowledge base."""

__version__ = "0.1.0"
__logo__ = "🚗"
