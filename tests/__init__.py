"""Test package for Substrate Terminal.

Structure:
    - unit/: Individual modules in isolation
    - integration/: Session, controller and HTTP app working together

No test reaches the network. The chat service is replaced by a scripted
backend; agno and google-genai are patched where their wiring is checked.
Leverages pytest with pytest-check for soft assertions.
"""
