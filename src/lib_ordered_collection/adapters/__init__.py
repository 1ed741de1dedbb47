"""Adapters translating external inputs into collection data."""
