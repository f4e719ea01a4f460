# =============================================================================
# app/ - FastAPI Application Package
# =============================================================================
# This package contains the FastAPI web application:
# - main.py: App factory, ordered middleware / handler registration
# - server.py: Process entry point (main vs worker port, uvicorn)
# - config.py: Environment variable loading and settings
# - routers/: API endpoint definitions organized by feature
# - websocket/: Real-time events shared across processes via Redis
#
# The app layer is thin - it handles HTTP concerns and delegates
# business logic to the core/ package.
# =============================================================================

__version__ = "1.0.0"
