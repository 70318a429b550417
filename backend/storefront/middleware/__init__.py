# Middleware package init
"""
Storefront Backend: Middleware Package
========================================

Middleware Chain:
    Request → [Request ID] → [Logging] → [CORS] → Route Handler

    - Request ID runs first so every later log line can carry the ID.
    - Logging measures the full downstream duration and final status.
    - CORS is FastAPI's CORSMiddleware (handles preflight requests).
"""
