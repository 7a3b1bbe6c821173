from __future__ import annotations

from fastapi import FastAPI

from .routes import (
    appliances_router,
    batteries_router,
    solar_router,
    state_router,
    system_router,
)


def create_app() -> FastAPI:
    """
    Instantiate the FastAPI application and register routers.

    Creates the main FastAPI application with CORS middleware (the
    dashboard polls from another origin) and registers:
    - state: snapshot, tick, clock and weather controls
    - appliances: load toggles
    - solar: array configuration
    - batteries: bank configuration
    - system: electrical configuration

    Returns:
        FastAPI: Configured FastAPI application instance ready to serve.

    Example:
        ```python
        app = create_app()
        uvicorn.run(app, host="0.0.0.0", port=8000)

        # Or use the pre-created instance
        from sim_microgrid.api.app import app
        ```
    """
    app = FastAPI(
        title="Household Microgrid Simulator API",
        version="0.1.0",
        description="Drive and inspect the tick-based microgrid simulation.",
    )

    from fastapi.middleware.cors import CORSMiddleware

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(state_router)
    app.include_router(appliances_router)
    app.include_router(solar_router)
    app.include_router(batteries_router)
    app.include_router(system_router)

    return app


app = create_app()
