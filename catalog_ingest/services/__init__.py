"""Ingestion pipeline stages, batch orchestration and catalog collaborators."""
