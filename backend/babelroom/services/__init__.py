"""Business Logic Services.

This package contains the service modules that implement the relay.

Service Categories:
- Cache: Translation cache and TTL sweeper
- Translation: Providers and the fallback provider chain
- Rooms: Room registry, session table, membership operations
- Connection: Per-connection outbound queues
- Relay: Per-recipient translation fan-out
- Session: Socket protocol dispatch and websocket transport
"""
