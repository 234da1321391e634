from fastapi import APIRouter, Depends, HTTPException, status
from typing import List, Optional
from app.dependencies import get_current_user_id
from app.schemas import (
    ClientCreate, ClientUpdate, ClientResponse,
    CreatedResponse, UpdatedResponse, DeletedResponse,
)
from app.store import ClientStore, get_store
from app.validation import validate_create, validate_update, clean_create, clean_update

# Every route here needs a live session; the check runs before the handler body
router = APIRouter(
    prefix="/clients",
    tags=["clients"],
    dependencies=[Depends(get_current_user_id)]
)


def _reject(errors: List[str]):
    raise HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail=", ".join(errors)
    )


SQL_INT_RANGE = range(-2 ** 63, 2 ** 63)


def _parse_id(client_id: str) -> Optional[int]:
    """Ids that are not 64-bit integers cannot match a row."""
    try:
        value = int(client_id)
    except ValueError:
        return None
    return value if value in SQL_INT_RANGE else None


@router.get("", response_model=List[ClientResponse])
async def list_clients(store: ClientStore = Depends(get_store)):
    return store.list_clients()


@router.get("/{client_id}", response_model=ClientResponse)
async def get_client(client_id: str, store: ClientStore = Depends(get_store)):
    row_id = _parse_id(client_id)
    client = store.get_client(row_id) if row_id is not None else None
    if client is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not found")
    return client


@router.post("", response_model=CreatedResponse)
async def create_client(payload: ClientCreate, store: ClientStore = Depends(get_store)):
    fields = payload.model_dump(exclude_unset=True)
    errors = validate_create(fields)
    if errors:
        _reject(errors)
    return CreatedResponse(id=store.insert_client(clean_create(fields)))


@router.put("/{client_id}", response_model=UpdatedResponse)
async def update_client(
    client_id: str,
    payload: ClientUpdate,
    store: ClientStore = Depends(get_store)
):
    """
    Coalesce-with-existing update.

    Only supplied fields are written. An unknown id is not an error: updated is 0.
    """
    fields = payload.model_dump(exclude_unset=True)
    errors = validate_update(fields)
    if errors:
        _reject(errors)
    row_id = _parse_id(client_id)
    if row_id is None:
        return UpdatedResponse(updated=0)
    return UpdatedResponse(updated=store.update_client(row_id, clean_update(fields)))


@router.delete("/{client_id}", response_model=DeletedResponse)
async def delete_client(client_id: str, store: ClientStore = Depends(get_store)):
    row_id = _parse_id(client_id)
    if row_id is None:
        return DeletedResponse(deleted=0)
    return DeletedResponse(deleted=store.delete_client(row_id))
