# Middleware package init
"""
Conduit Backend — Middleware Package
======================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain (order matters!):
    Request → [Rate Limit] → [Request ID] → [Logging] → [CORS] → Route Handler

    1. Rate Limit first: reject abusive clients before any processing
    2. Request ID: correlation id for logs and the X-Request-ID header
    3. Logging: one access line per request, tagged with the request id
    4. CORS: FastAPI's CORSMiddleware (handles preflight)

    The order is reversed for responses, so the request id is already set
    when the logging middleware writes its line.
"""
