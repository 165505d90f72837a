from prepwise.api.evaluation.routes import router

__all__ = ["router"]
