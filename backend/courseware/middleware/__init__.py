# Middleware package init
"""
Courseware Backend — Middleware Package
========================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain:
    Request → [Request ID] → [Logging] → [GZip] → [CORS] → Route Handler

    Request ID runs first so the access log line and every log entry made
    while handling the request share the same correlation id.
"""
