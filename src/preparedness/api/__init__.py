from preparedness.api.errors import install_exception_handlers
from preparedness.api.routes import (
    community_router,
    help_router,
    notification_router,
    offer_router,
    resource_router,
    status_router,
)

routers = [community_router, resource_router, offer_router, help_router, notification_router, status_router]

__all__ = ["install_exception_handlers", "routers"]
