"""WebSocket tools: file sender, relay server, Redis channel subscriber and handshake helper."""

__version__ = "0.1.0"