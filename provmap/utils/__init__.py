"""Shared helpers for the provmap CLI."""
