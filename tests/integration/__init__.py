"""Integration tests for components working together.

Coverage:
    - Full exchange from controller through session manager to transcript
    - FastAPI app health reporting through ASGITransport
"""
