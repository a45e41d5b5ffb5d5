"""
spa_host.api.routers

API routers mounted under the API prefix by `api.routes.register_routes`.
"""
