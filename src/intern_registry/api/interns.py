# src/intern_registry/api/interns.py
"""
HTTP routes for intern records.

Paths are kept as existing clients call them (`/newIntern`, `/{id}`,
`/eraseIntern/{id}`). Every route delegates to InternService; failures are
rendered by the handlers in api/error_handlers.py.
"""

import logging

from fastapi import APIRouter, Depends, Path, Response, status

from intern_registry.core.dependencies import get_intern_service
from intern_registry.schemas.intern import InternPayload, InternRead
from intern_registry.services.intern_service import InternService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["interns"])

# Largest id the BIGINT column can hold.
MAX_INTERN_ID = 2**63 - 1


@router.get("/interns", response_model=list[InternRead])
async def list_interns(service: InternService = Depends(get_intern_service)):
    logger.info("REST request to get all Interns")
    return await service.list_interns()


@router.get("/interns/{intern_id}", response_model=InternRead)
async def get_intern(
    intern_id: int = Path(..., le=MAX_INTERN_ID),
    service: InternService = Depends(get_intern_service),
):
    logger.info("REST request to get Intern ID: %s", intern_id)
    return await service.get_intern(intern_id)


@router.post("/newIntern", response_model=InternRead)
async def add_intern(payload: InternPayload, service: InternService = Depends(get_intern_service)):
    logger.info("REST request to save Intern: %s", payload.name)
    return await service.save_intern(payload)


@router.put("/{intern_id}", response_model=InternRead)
async def update_intern(
    payload: InternPayload,
    intern_id: int = Path(..., le=MAX_INTERN_ID),
    service: InternService = Depends(get_intern_service),
):
    logger.info("REST request to update Intern ID: %s", intern_id, extra={"email": payload.email})
    # The path id always decides the target row, whatever the body carries.
    return await service.save_intern(payload, intern_id)


@router.delete("/eraseIntern/{intern_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_intern(
    intern_id: int = Path(..., le=MAX_INTERN_ID),
    service: InternService = Depends(get_intern_service),
):
    logger.warning("REST request to delete Intern ID: %s", intern_id)
    await service.delete_intern(intern_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
