"""
spa_host.observability

Observability package.

Responsibilities:
- Structured diagnostic logging and the plain server log line.
- Request context tracking and API access logging.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Metrics/tracing exporters can be added here without touching the API layer.
