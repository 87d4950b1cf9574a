"""Canonical media records, provider adapters and title matching."""
