from fastapi import APIRouter, Depends, Query

from app.api.deps import get_current_user, get_reference_directory
from app.models.contact import ContactPublic
from app.models.location import CountryPublic, DivisionPublic
from app.models.user import User
from app.services.lookup_service import ReferenceDirectory

router = APIRouter(prefix="/reference", tags=["reference"])


@router.get("/contacts", response_model=list[ContactPublic])
async def read_contacts(
    current_user: User = Depends(get_current_user),
    directory: ReferenceDirectory = Depends(get_reference_directory),
) -> list[ContactPublic]:
    return [ContactPublic(id=c.id, name=c.name, email=c.email) for c in directory.contacts()]


@router.get("/countries", response_model=list[CountryPublic])
async def read_countries(
    current_user: User = Depends(get_current_user),
    directory: ReferenceDirectory = Depends(get_reference_directory),
) -> list[CountryPublic]:
    return [CountryPublic(id=cid, name=name) for cid, name in directory.countries()]


@router.get("/divisions", response_model=list[DivisionPublic])
async def read_divisions(
    country_id: int | None = Query(None),
    current_user: User = Depends(get_current_user),
    directory: ReferenceDirectory = Depends(get_reference_directory),
) -> list[DivisionPublic]:
    """First-level divisions, optionally limited to one country."""
    return [
        DivisionPublic(id=d.id, name=d.name, country_id=d.country_id)
        for d in directory.divisions(country_id)
    ]
