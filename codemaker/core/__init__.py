"""Core client, context resolution and processing orchestration."""
