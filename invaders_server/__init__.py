"""Server-authoritative arcade shooter game server."""
