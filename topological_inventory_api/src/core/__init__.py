"""
Core application utilities.

This package provides:
- Application-level settings (separate from DB settings)
- Logging configuration with request/tenant context
- Identity header decoding and the per-request context built from it
- Dependency helpers (entitlement check, tenant-scoped DB session)
"""
