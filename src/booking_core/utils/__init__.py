"""Shared utilities for the booking core."""
