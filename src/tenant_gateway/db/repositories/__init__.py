"""
tenant_gateway.db.repositories

Queries over `sites` (host resolution, readiness) and `users` (session and API
token lookup). Import from the submodules.
"""
