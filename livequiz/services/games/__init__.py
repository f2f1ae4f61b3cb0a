"""Game domain services: sessions, scoring and timers.

This package holds the transport-free game logic used by the socket
handlers and HTTP routes, keeping transport concerns separated from the
session state machine.
"""
