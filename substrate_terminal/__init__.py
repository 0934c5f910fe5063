"""Substrate Terminal - themed chat terminal over a streaming Gemini session.

Combines an agno agent on a Gemini model for the chat session, NiceGUI for
the terminal page, FastAPI for the server shell, and Pydantic for
configuration and data models.

Components:
    - agent: session configuration, chat backend, session manager, oracle
    - chat: transcript store and the controller streaming into it
    - simulation: cosmetic random-walk series
    - api: FastAPI application factory
    - ui: NiceGUI terminal page
    - models: shared Pydantic models
"""

__version__ = "0.1.0"
