"""
Core application utilities for settings, logging, security and FastAPI dependencies.

This package provides:
- Application-level settings (separate from DB settings)
- Structured logging with request context
- The session guard and identity cookie helpers
- Dependency helpers (database session, signed-in identity)
"""
