"""NiceGUI presentation layer: the themed terminal page.

Renders transcript snapshots and streams the trailing reply in place.
Holds no conversation state of its own; everything goes through the
ChatController it is registered with.
"""

from substrate_terminal.ui.terminal_page import register_terminal_page

__all__ = ["register_terminal_page"]
