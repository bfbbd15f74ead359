"""
tenant_gateway.api.routers

Router modules mounted by `api.app.create_app`.
"""
