"""
WebSocket transport and event handling for Secret Hitler rooms.
"""

from .events import *
from .server import ConnectionManager, GameServer

__all__ = ["ConnectionManager", "GameServer"]
