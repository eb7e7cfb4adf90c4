"""Utility modules for n8n-sync."""
