"""
Health Info - diagnostic endpoints for Starlette applications.

Adds /health, /info and /metrics routes to a Starlette app, resolves
the git commit details of the running build, and ships a standalone
health-check probe for container liveness checks.
"""

__version__ = "0.1.0"
