"""
tenant_gateway.db

Persistence package (SQLAlchemy async).

Responsibilities:
- Provide ORM models, the pooled store handle, and repositories.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Everything outside this package talks to the database through `db.store` handles
# and the repositories; no module opens engines on its own.
