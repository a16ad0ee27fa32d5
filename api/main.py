"""FastAPI application for the service metadata receiver."""
from fastapi import FastAPI

from api.routers import metadata
from receiver import __version__

app = FastAPI(
    title="Service Metadata Receiver API",
    description="""
    Resolves service identities from proxy node metadata.

    Provides access to:
    - The configured field mappings
    - Inflating a service identity from a metadata document
    """,
    version=__version__,
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json",
)

app.include_router(metadata.router, prefix="/api")


@app.get("/api/health")
def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "version": __version__}


@app.get("/")
def root():
    """Root endpoint - redirect to docs."""
    return {
        "message": "Service Metadata Receiver API",
        "docs": "/api/docs",
        "health": "/api/health",
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
