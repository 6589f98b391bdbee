"""
Campus Placement Portal - Main Application

FastAPI backend with:
- PostgreSQL (any SQLAlchemy URL) for users, postings and applications
- MongoDB for student verification documents
- JWT authentication with role-based access

Run: uvicorn placement_portal.main:app --reload
"""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from placement_portal import __version__
from placement_portal.api.routes import api_router
from placement_portal.core.config import get_settings
from placement_portal.core.exceptions import register_exception_handlers
from placement_portal.db.mongodb import check_mongo_connection, init_mongo_indexes
from placement_portal.db.postgres import check_postgres_connection, engine
from placement_portal.db.tables import init_tables
from placement_portal.services.reference_service import seed_reference_data

settings = get_settings()

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title="Campus Placement Portal",
    description="""
    Connects students, faculty, recruiters and administrators around job postings.

    ## Features
    - **Authentication**: JWT-based auth with four roles
    - **Postings**: Recruiters publish postings with eligibility rules
    - **Applications**: Eligibility-checked applications with a strict status lifecycle
    - **Verification**: Faculty review student documents
    - **Analytics**: Funnel, skill demand, pipeline velocity and CSV export
    """,
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc"
)

# CORS middleware (allow all for development)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

# Include API routes
app.include_router(api_router, prefix="/api")


@app.on_event("startup")
async def startup_event():
    """Create tables, seed reference data and build MongoDB indexes."""
    init_tables(engine)
    if settings.seed_reference_data:
        seed_reference_data()
    try:
        init_mongo_indexes()
        logger.info("MongoDB indexes initialized")
    except Exception as e:
        logger.warning("MongoDB index initialization failed: %s", e)


@app.get("/", tags=["Health"])
async def root():
    return {"status": "healthy", "app": "Campus Placement Portal", "version": __version__}


@app.get("/health", tags=["Health"])
async def health_check():
    """Detailed health check."""
    postgres_ok = check_postgres_connection()
    mongo_ok = check_mongo_connection()
    return {
        "status": "healthy" if postgres_ok and mongo_ok else "degraded",
        "postgres": "connected" if postgres_ok else "disconnected",
        "mongodb": "connected" if mongo_ok else "disconnected"
    }
