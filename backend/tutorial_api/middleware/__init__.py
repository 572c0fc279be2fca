# Middleware package init
"""
Tutorial API - Middleware Package
=================================

Middleware Chain (execution order):
    Request → [Request ID] → [Logging] → [GZip] → [CORS] → Route Handler

    Request ID runs first so the access log line carries the correlation ID.
    Responses pass back through the chain in reverse: Logging sees the final
    status code, and Request ID adds the X-Request-ID header last.
"""
