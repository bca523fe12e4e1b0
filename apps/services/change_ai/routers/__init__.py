"""
Router Modules

Provides FastAPI routers for every endpoint of the service.

Router Organization:
    - health: liveness check
    - extract: price extraction
    - validate: change validation
    - repair: selector repair
    - match: product matching
    - webhook: changedetection.io integration
"""

from apps.services.change_ai.routers.health import router as health_router
from apps.services.change_ai.routers.extract import router as extract_router
from apps.services.change_ai.routers.validate import router as validate_router
from apps.services.change_ai.routers.repair import router as repair_router
from apps.services.change_ai.routers.match import router as match_router
from apps.services.change_ai.routers.webhook import router as webhook_router

__all__ = [
    "health_router",
    "extract_router",
    "validate_router",
    "repair_router",
    "match_router",
    "webhook_router",
]
