"""Conversation state: the transcript and the controller that streams into it."""

from substrate_terminal.chat.controller import ChatController
from substrate_terminal.chat.transcript import TranscriptStore

__all__ = ["ChatController", "TranscriptStore"]
