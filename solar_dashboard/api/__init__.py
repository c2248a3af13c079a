"""
HTTP API package: FastAPI application factory and dashboard routers.
"""
