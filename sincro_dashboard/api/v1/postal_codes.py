"""GET /v1/postal-codes/{cep} - Address auto-fill lookup"""

from fastapi import APIRouter, Depends, HTTPException

from sincro_dashboard.api.v1.schemas import AddressSchema
from sincro_dashboard.api.dependencies import get_current_user, get_postal_code_client
from sincro_dashboard.domain.models import User
from sincro_dashboard.infrastructure.clients.postal_code import PostalCodeClient

router = APIRouter()


@router.get("/postal-codes/{cep}", response_model=AddressSchema)
async def lookup_postal_code(
    cep: str,
    postal_code_client: PostalCodeClient = Depends(get_postal_code_client),
    user: User = Depends(get_current_user),
):
    """
    Resolve a CEP into address fields.

    404 means nothing could be filled in; the client form stays editable.
    """
    address = await postal_code_client.lookup(cep)
    if address is None:
        raise HTTPException(status_code=404, detail="Postal code not found")
    return AddressSchema.model_validate(address)
