"""
API Routes - Combines all route modules into single router.
"""

from fastapi import APIRouter

from placement_portal.api.routes.auth_routes import router as auth_router
from placement_portal.api.routes.user_routes import router as user_router
from placement_portal.api.routes.admin_routes import router as admin_router
from placement_portal.api.routes.posting_routes import router as posting_router
from placement_portal.api.routes.application_routes import router as application_router
from placement_portal.api.routes.verification_routes import router as verification_router
from placement_portal.api.routes.reference_routes import router as reference_router
from placement_portal.api.routes.analytics_routes import router as analytics_router
from placement_portal.api.routes.dashboard_routes import router as dashboard_router

# Main API router
api_router = APIRouter()

# Include all sub-routers
api_router.include_router(auth_router)
api_router.include_router(user_router)
api_router.include_router(admin_router)
api_router.include_router(posting_router)
api_router.include_router(application_router)
api_router.include_router(verification_router)
api_router.include_router(reference_router)
api_router.include_router(analytics_router)
api_router.include_router(dashboard_router)
