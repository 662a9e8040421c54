"""
Framework integrations.

Available integrations:
- fastapi: 403 exception handler, authentication middleware and dependency
"""
