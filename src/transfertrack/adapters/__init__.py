"""Adapters implementing the transfertrack ports."""
