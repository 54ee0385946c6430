# Middleware package init
"""
Notebook Backend — Middleware Package
======================================

Middleware Chain (order matters!):
    Request → [Request ID] → [Logging] → [CORS] → Route Handler

    1. Request ID: correlation ID for every log line of the request
    2. Logging: one access log line per request, tagged with that ID
    3. CORS: Applied by FastAPI's CORSMiddleware (handles preflight)
"""
