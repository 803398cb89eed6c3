from fastapi import APIRouter

from dependencies.meeting import MeetingService
from schemas.api import ApiResponse


router = APIRouter()


@router.get("/health", response_model=ApiResponse[dict[str, str | bool]])
def health_check(orchestrator: MeetingService) -> ApiResponse[dict[str, str | bool]]:
    """Liveness plus whether a generation provider has credentials."""
    return ApiResponse(
        success=True,
        data={
            "status": "healthy",
            "generationConfigured": orchestrator.understanding.client.is_configured(),
        },
        message="Health check successful",
    )
