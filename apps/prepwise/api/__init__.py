"""API router registration helpers.

Routers are imported lazily inside `register_routes` so importing a submodule
never builds Mongo or Gemini clients as a side effect.
"""

from fastapi import FastAPI


def register_routes(app: FastAPI) -> None:
    """Attach all API routers (lazy imports)."""
    from prepwise.api.evaluation import router as evaluation_router
    from prepwise.api.interviews import insights_router, simulation_router
    from prepwise.api.problems import router as problems_router
    from prepwise.api.system import router as system_router

    routers = [
        system_router,
        problems_router,
        evaluation_router,
        simulation_router,
        insights_router,
    ]
    for router in routers:
        app.include_router(router)
