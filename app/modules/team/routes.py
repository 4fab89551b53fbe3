from fastapi import APIRouter, Depends
from app.database.supabase_client import get_service_supabase
from app.modules.team.schemas import TeamMemberCreate, TeamMemberUpdate, TeamMemberResponse
from app.modules.team.service import TeamService
from app.core.dependencies import require_permission
from supabase import Client
from typing import List, Dict

router = APIRouter(prefix="/team", tags=["team"])


def get_team_service(supabase: Client = Depends(get_service_supabase)) -> TeamService:
    return TeamService(supabase)


@router.get("", response_model=List[TeamMemberResponse])
async def list_team(service: TeamService = Depends(get_team_service)):
    """Program team (public)"""
    return service.list_members()


@router.get("/{member_id}", response_model=TeamMemberResponse)
async def get_team_member(member_id: str, service: TeamService = Depends(get_team_service)):
    return service.get_member(member_id)


@router.post("", response_model=Dict[str, TeamMemberResponse], status_code=201)
async def create_team_member(
    member_data: TeamMemberCreate,
    user_data: Dict = Depends(require_permission("team:manage")),
    service: TeamService = Depends(get_team_service)
):
    return {"teamMember": service.create_member(member_data)}


@router.put("/{member_id}", response_model=Dict[str, TeamMemberResponse])
async def update_team_member(
    member_id: str,
    member_data: TeamMemberUpdate,
    user_data: Dict = Depends(require_permission("team:manage")),
    service: TeamService = Depends(get_team_service)
):
    return {"teamMember": service.update_member(member_id, member_data)}


@router.delete("/{member_id}")
async def delete_team_member(
    member_id: str,
    user_data: Dict = Depends(require_permission("team:manage")),
    service: TeamService = Depends(get_team_service)
):
    service.delete_member(member_id)
    return {"success": True}
