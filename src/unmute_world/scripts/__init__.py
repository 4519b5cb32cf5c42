"""Operational command-line helpers."""
