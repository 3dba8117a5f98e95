"""Shared test fixtures for wtcreate."""
