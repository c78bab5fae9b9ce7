"""Shared utilities for presentation-client."""
