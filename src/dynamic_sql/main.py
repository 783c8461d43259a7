"""FastAPI application serving registered dynamic SQL statements."""

import logging
import os
from contextlib import asynccontextmanager
from pathlib import Path

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from dynamic_sql.loader import load_statements
from dynamic_sql.registry import statements
from dynamic_sql.routes import statements as statement_routes

# Load environment variables
env_path = Path.cwd() / ".env"
if env_path.exists():
    load_dotenv(env_path)

# Configure logging
logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup/shutdown events."""
    # Startup
    logger.info("Starting Dynamic SQL Service...")
    logger.info(f"Server running on port {os.getenv('PORT', '8080')}")
    statements_path = os.getenv("STATEMENTS_PATH")
    if statements_path:
        names = load_statements(statements_path, statements)
        logger.info(f"Registered {len(names)} statements from {statements_path}")
    else:
        logger.warning("STATEMENTS_PATH not set, no statements loaded")
    logger.info("Ready for requests")
    yield
    # Shutdown
    logger.info("Shutting down Dynamic SQL Service...")


# Create FastAPI app
app = FastAPI(
    title="Dynamic SQL",
    description="Conditional SQL statement templates",
    version="0.1.0",
    lifespan=lifespan,
)

# Configure CORS
cors_origins = os.getenv("CORS_ORIGINS", "*").split(",")
app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register routers
app.include_router(statement_routes.router)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}


def run():
    """Run the service with uvicorn."""
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=int(os.getenv("PORT", "8080")))


if __name__ == "__main__":
    run()
