"""Gemini session layer for the substrate terminal.

Responsibilities:
    - Session configuration loaded from the environment
    - The narrow ChatBackend interface and its agno/Gemini implementation
    - The session manager's cumulative streaming contract
    - One-shot grounded signature searches

Keeps the chat service behind one seam so the rest of the app can be
exercised against a scripted fake.
"""

from substrate_terminal.agent.chat_agent import AgnoChatBackend, ChatBackend
from substrate_terminal.agent.config import SessionConfig, get_session_config
from substrate_terminal.agent.oracle import SignatureOracle
from substrate_terminal.agent.session import CancellationToken, SessionManager

__all__ = [
    "AgnoChatBackend",
    "CancellationToken",
    "ChatBackend",
    "SessionConfig",
    "SessionManager",
    "SignatureOracle",
    "get_session_config",
]
