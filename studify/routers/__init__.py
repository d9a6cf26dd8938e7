from .roadmap import router as roadmap_router

ROUTERS = (roadmap_router,)

__all__ = ["ROUTERS", "roadmap_router"]
