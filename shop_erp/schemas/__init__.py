"""Pydantic models for posted forms and JSON envelopes."""
