# =============================================================================
# app/ - Host Integration Package
# =============================================================================
# This package wires the failure pipeline into a host:
# - config.py: Environment variable loading and settings
# - bootstrap.py: Builds a FailureInterceptor from settings
# - middleware.py: HTTP failure channel (ASGI middleware)
# - main.py: Example FastAPI app with the interceptor installed
# - routers/: API endpoint definitions
#
# The app layer is thin - it handles HTTP concerns and delegates
# failure handling to the core/ package.
# =============================================================================
