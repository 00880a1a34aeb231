# =============================================================================
# app/routers/ - API Routes of the Example Host
# =============================================================================
# - health.py: liveness and failure-policy status
# =============================================================================

from . import health

__all__ = ["health"]
