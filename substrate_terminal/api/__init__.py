"""FastAPI shell for the substrate terminal.

Endpoints:
    - GET /health: Service health and chat session status
    - GET /: NiceGUI terminal page (mounted by main)
"""

from substrate_terminal.api.app import create_app

__all__ = ["create_app"]
