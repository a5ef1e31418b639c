"""Catalog, payment and money services."""
