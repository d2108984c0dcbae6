from fastapi import APIRouter

from internhub.api.v1.endpoints import internships

api_router = APIRouter()

api_router.include_router(internships.router)


@api_router.get("/health", tags=["Health"])
async def health_check():
    """Simple health check under the versioned prefix"""
    return {"status": "healthy", "service": "internhub-backend"}
