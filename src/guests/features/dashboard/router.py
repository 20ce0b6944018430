import logging

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import Response
from pydantic import BaseModel

from src.guests.aggregation import aggregate, summarize_collection
from src.guests.dependencies import get_individual_read_model
from src.guests.dtos import DietaryRestriction, RSVPStatus, StoreError
from src.guests.features.dashboard.csv_export import CSV_FILENAME, export_individuals_csv
from src.guests.repository.read_models import IndividualReadModel
from src.guests.schemas import GroupResponse
from src.guests.urls import DASHBOARD_EXPORT_URL, DASHBOARD_URL

logger = logging.getLogger(__name__)

router = APIRouter()


class SummaryResponse(BaseModel):
    total_individuals: int
    total_groups: int
    status_counts: dict[RSVPStatus, int]
    dietary_counts: dict[DietaryRestriction, int]


class DashboardResponse(BaseModel):
    groups: list[GroupResponse]
    summary: SummaryResponse
    total_groups: int
    total_individuals: int
    unfiltered_groups: int


@router.get(DASHBOARD_URL, response_model=DashboardResponse)
async def get_dashboard(
    q: str | None = None,
    read_model: IndividualReadModel = Depends(get_individual_read_model),
) -> DashboardResponse:
    """
    Groups for the host dashboard, filtered by ``q``.
    The summary always covers the whole collection.
    """
    try:
        individuals = await read_model.find_all()
    except StoreError as e:
        logger.error(f"Failed to load dashboard: {e}")
        raise HTTPException(status_code=503, detail="Failed to load RSVPs. Please refresh the page.")

    groups = list(aggregate(individuals, q).values())
    summary = summarize_collection(individuals)
    return DashboardResponse(
        groups=[GroupResponse.from_view(view) for view in groups],
        summary=SummaryResponse(
            total_individuals=summary.total_individuals,
            total_groups=summary.total_groups,
            status_counts=summary.status_counts,
            dietary_counts=summary.dietary_counts,
        ),
        total_groups=len(groups),
        total_individuals=sum(view.total_members for view in groups),
        unfiltered_groups=summary.total_groups,
    )


@router.get(DASHBOARD_EXPORT_URL)
async def export_csv(
    read_model: IndividualReadModel = Depends(get_individual_read_model),
) -> Response:
    try:
        individuals = await read_model.find_all()
    except StoreError as e:
        logger.error(f"Failed to export RSVPs: {e}")
        raise HTTPException(status_code=503, detail="Failed to export RSVPs")

    return Response(
        content=export_individuals_csv(individuals),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{CSV_FILENAME}"'},
    )
