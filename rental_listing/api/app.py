"""FastAPI application."""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from rental_listing.api.routes.listing import router as listing_router
from rental_listing.api.routes.machines import router as machines_router

DESCRIPTION = """
## Equipment Rental Listing API

Find rentable and purchasable machines near the service area.

### Features

* **Listing pages** - Facet counts, multi-select filters, sorting and pagination
* **Machine search** - By type, make, model, keywords or catalog class
* **Nearby search** - Geo radius search, nearest first
* **Buy it now** - Local machines plus out-of-area machines for purchase

### Data Source

Machines come from an external search index queried with OData filters.
Search responses are cached in memory for a few minutes; single machine
lookups are always fetched fresh.
"""

app = FastAPI(
    title="Equipment Rental Listing API",
    description=DESCRIPTION,
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_tags=[
        {
            "name": "listing",
            "description": "Filtered, sorted and paginated machine listings",
        },
        {
            "name": "machines",
            "description": "Machine search and lookup against the search index",
        },
    ],
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routes
app.include_router(listing_router)
app.include_router(machines_router)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "ok"}


if __name__ == "__main__":
    import uvicorn

    from rental_listing.config import settings

    uvicorn.run(app, host=settings.api_host, port=settings.api_port)
