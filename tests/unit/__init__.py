"""Unit tests for individual components in isolation.

Coverage:
    - agent/: configuration, backend wiring, session streaming, oracle
    - chat/: transcript store and controller
    - simulation/: random-walk generator
"""
