from prepwise.api.problems.routes import router

__all__ = ["router"]
