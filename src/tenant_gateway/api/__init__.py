"""
tenant_gateway.api

API package for the tenant gateway.

Responsibilities:
- FastAPI app factory, request middleware and router modules.
- API-layer dependency wiring.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# The API layer should remain thin: context building + auth + delegation.
