"""
API module.

FastAPI routers, dependencies and the application factory.
"""
