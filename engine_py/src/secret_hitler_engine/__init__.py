"""
Secret Hitler room engine: rules, room state and the websocket transport.
"""

__version__ = "1.0.0"
