"""
spa_host.api

API package for the spa-host service.

Responsibilities:
- FastAPI app factory, middleware chain and bootstrap sequencer.
- Route registration and client asset serving (static bundle or dev bridge).
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# The API layer should remain thin: request parsing + error mapping + delegation.
