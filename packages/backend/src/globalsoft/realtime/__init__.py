"""Real-time infrastructure — connection registry + relay + WebSocket.

Events flow through two paths:
1. Client chat frame → relay → persisted Message → receiver's connection
2. Product created (HTTP API) → relay broadcast → every open connection

Everything is in-process: one relay owns one registry, both bound to
the app instance (app.state.relay).
"""

from globalsoft.realtime.registry import ConnectionRegistry
from globalsoft.realtime.relay import Connection, RealtimeRelay

__all__ = ["Connection", "ConnectionRegistry", "RealtimeRelay"]
