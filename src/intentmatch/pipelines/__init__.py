"""Pipelines: query orchestration."""
