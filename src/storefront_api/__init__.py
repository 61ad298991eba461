"""Storefront auth HTTP API (FastAPI) and administration CLI."""
