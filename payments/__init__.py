"""Idempotent payment recording service."""
