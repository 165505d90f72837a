from prepwise.api.interviews.routes import insights_router, simulation_router

__all__ = ["insights_router", "simulation_router"]
