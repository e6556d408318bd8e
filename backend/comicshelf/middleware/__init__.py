# Middleware package init
"""
ComicShelf Backend — Middleware Package
========================================

Middleware Chain (order matters!):
    Request → [Request ID] → [Logging] → [CORS] → Route Handler

    1. Request ID: Generate correlation ID for logging and error bodies
    2. Logging: Access log line with status and duration
    3. CORS: Provided by FastAPI
"""
