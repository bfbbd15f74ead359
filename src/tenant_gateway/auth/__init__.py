"""
tenant_gateway.auth

Authentication/authorization package.

Responsibilities:
- Signed session tokens and principal loading.
- Composable authorization filters and the FastAPI dependency that runs them.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Credential storage and verification are delegated to the user repository; this
# package only decides whether a request may proceed.
