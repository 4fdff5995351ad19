"""Dashboard router"""

from fastapi import APIRouter, Depends

from ...state import AppState, get_app_state
from .schemas import ClientSummary, DashboardResponse, DashboardStats
from .service import DashboardService

router = APIRouter(prefix="/dashboard", tags=["Dashboard"])


def get_dashboard_service(state: AppState = Depends(get_app_state)) -> DashboardService:
    """Dependency injection for DashboardService"""
    return DashboardService(state)


@router.get("", response_model=DashboardResponse)
async def get_dashboard(service: DashboardService = Depends(get_dashboard_service)):
    """Statistics and client lists for the home screen"""
    return service.get_dashboard()


@router.get("/stats", response_model=DashboardStats)
async def get_stats(service: DashboardService = Depends(get_dashboard_service)):
    return service.get_dashboard().stats


@router.get("/summary", response_model=ClientSummary)
async def get_summary(service: DashboardService = Depends(get_dashboard_service)):
    return service.get_summary()
