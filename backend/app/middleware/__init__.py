# Middleware package init
"""
Blog Backend — Middleware Package
===================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain (outermost first):
    Request → [Body Size Limit] → [Request ID] → [Logging] → [CORS] → Route Handler

    1. Body Size Limit: reject oversized bodies before anything reads them
    2. Request ID: correlation ID for the log lines below
    3. Logging: API requests logged on arrival and on completion
    4. CORS: FastAPI's CORSMiddleware (preflight and allow-list)
"""
