"""Category listing with approved-publication counts."""

from typing import Annotated

from fastapi import APIRouter, Depends

from citylinker.schemas.catalog import CategoryWithCount
from citylinker.services.storage import DatabaseStorage, get_storage

router = APIRouter()


@router.get("", response_model=list[CategoryWithCount])
def list_categories(
    storage: Annotated[DatabaseStorage, Depends(get_storage)],
) -> list[CategoryWithCount]:
    return storage.get_categories()
