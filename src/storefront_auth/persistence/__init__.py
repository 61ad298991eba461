"""Persistence implementations for storefront_auth.

Repository interfaces live in storefront_auth.repositories; this package
holds technology-specific implementations (currently SQLAlchemy).
"""
