"""Shared building blocks: constants, errors, logging and data models."""
