"""
Reference Data Routes

GET /departments - List departments
POST /departments - Add a department (admin only)
GET /skills - List skills
POST /skills - Add a skill (admin only)
"""

from typing import List

from fastapi import APIRouter, Depends

from placement_portal.core.auth import require_roles
from placement_portal.services.reference_service import ReferenceDataRepository
from placement_portal.schemas.schemas import DataResponse, Department, NamedCreate, Skill, User

router = APIRouter(tags=["Reference Data"])


@router.get("/departments", response_model=DataResponse[List[Department]])
async def list_departments():
    return DataResponse(data=ReferenceDataRepository().list_departments())


@router.post("/departments", response_model=DataResponse[Department], status_code=201)
async def create_department(request: NamedCreate, admin: User = Depends(require_roles("admin"))):
    return DataResponse(data=ReferenceDataRepository().create_department(request.name.strip()))


@router.get("/skills", response_model=DataResponse[List[Skill]])
async def list_skills():
    return DataResponse(data=ReferenceDataRepository().list_skills())


@router.post("/skills", response_model=DataResponse[Skill], status_code=201)
async def create_skill(request: NamedCreate, admin: User = Depends(require_roles("admin"))):
    return DataResponse(data=ReferenceDataRepository().create_skill(request.name.strip()))
