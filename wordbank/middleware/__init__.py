"""
WordBank Backend — Middleware Package
=======================================

Middleware Chain:
    Request → [Request ID] → [Logging] → [CORS] → Route Handler

    1. Request ID: generate the correlation ID used by every later log line
    2. Logging: access log with status and duration
    3. CORS: FastAPI's CORSMiddleware (answers preflight requests)
"""
