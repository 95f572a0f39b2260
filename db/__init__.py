"""
db/ - Database Layer
====================
Handles PostgreSQL connections, one-time schema initialization, and the error
types raised by the persistence layer.
This layer is the lowest in the architecture and has no dependencies on other layers.
"""
