"""
tenant_gateway.tenancy

Tenant ("site") package.

Responsibilities:
- The immutable tenant record carried by the request context.
- Host-name based tenant resolution.
"""

# Package marker.
