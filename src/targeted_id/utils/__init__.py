"""Shared utilities for targeted-id."""
