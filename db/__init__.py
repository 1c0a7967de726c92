"""
db/ - Database Layer
====================
Handles the PostgreSQL connection pool and the per-call transaction scope.
This layer is the lowest in the architecture and has no dependencies on other layers.
"""
