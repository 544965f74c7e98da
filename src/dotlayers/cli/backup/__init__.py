"""Backup management commands."""
