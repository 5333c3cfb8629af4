"""
Notes Service — Middleware Package
====================================

Cross-cutting concerns applied to every request.

Middleware Chain (outermost first):
    Request → [Request ID] → [Logging] → [CORS] → Route Handler

    1. Request ID: correlation ID for every log line of the request
    2. Logging: method, path, status and duration, tagged with the request ID
    3. CORS: FastAPI's CORSMiddleware (answers preflight OPTIONS itself)

Authentication is not middleware: it is a router dependency on /api/notes,
so /health and the docs stay open.
"""
