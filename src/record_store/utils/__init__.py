"""Shared utilities for the record store."""
