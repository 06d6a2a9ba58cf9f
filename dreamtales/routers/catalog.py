from fastapi import APIRouter

from ..models.catalog import OptionsResponse, all_options

router = APIRouter(tags=["Catalog"])


@router.get("/options", response_model=OptionsResponse)
def options_route() -> OptionsResponse:
    return all_options()
