"""
Analytics Routes (faculty and admin)

GET /analytics/funnel - Applications per status in pipeline order
GET /analytics/skills-demand - Most requested skills across postings
GET /analytics/pipeline-velocity - Average days between consecutive statuses
GET /analytics/export - All applications as a CSV download
"""

from typing import List

from fastapi import APIRouter, Depends
from fastapi.responses import Response

from placement_portal.core.auth import require_roles
from placement_portal.services.analytics import (
    export_csv, export_rows, pipeline_velocity, placement_funnel, skill_demand
)
from placement_portal.services.application_service import ApplicationRepository
from placement_portal.services.posting_service import PostingRepository
from placement_portal.services.reference_service import ReferenceDataRepository
from placement_portal.services.user_service import UserRepository
from placement_portal.schemas.schemas import (
    DataResponse, FunnelEntry, SkillDemandEntry, VelocityEntry
)

EXPORT_FILENAME = "applications_report.csv"

router = APIRouter(
    prefix="/analytics",
    tags=["Analytics"],
    dependencies=[Depends(require_roles("faculty", "admin"))],
)


@router.get("/funnel", response_model=DataResponse[List[FunnelEntry]])
async def funnel():
    return DataResponse(data=placement_funnel(ApplicationRepository().list()))


@router.get("/skills-demand", response_model=DataResponse[List[SkillDemandEntry]])
async def skills_demand():
    """Top 10 skills by number of postings requiring them, open or closed."""
    return DataResponse(data=skill_demand(PostingRepository().list(), ReferenceDataRepository().list_skills()))


@router.get("/pipeline-velocity", response_model=DataResponse[List[VelocityEntry]])
async def velocity():
    return DataResponse(data=pipeline_velocity(ApplicationRepository().list()))


@router.get("/export")
async def export_applications():
    rows = export_rows(
        ApplicationRepository().list(),
        UserRepository().list(),
        PostingRepository().list(),
        ReferenceDataRepository().list_departments(),
    )
    return Response(
        content=export_csv(rows),
        media_type="text/csv",
        headers={"Content-Disposition": f"attachment; filename={EXPORT_FILENAME}"},
    )
