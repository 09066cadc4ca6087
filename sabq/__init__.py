"""Sabq publishing — content-aware template recommendation service."""
