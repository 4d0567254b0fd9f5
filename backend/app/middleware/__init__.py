# Middleware package init
"""
Wine Catalog Backend — Middleware Package
===========================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain (outermost first, as added in main.create_app):
    Request → [Request ID] → [Rate Limit] → [Logging] → [Session] → [GZip] → [CORS] → Route

    1. Request ID comes first so even a 429 carries X-Request-ID
    2. Rate Limit rejects abusive clients before any other work
    3. Logging measures the full duration of the inner stack
"""
