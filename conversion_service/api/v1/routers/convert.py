"""Edition conversion endpoint."""
from __future__ import annotations

from fastapi import APIRouter, Depends

from conversion_service.api.schemas import (
    ConvertRequestSchema,
    ConvertResponseSchema,
    ErrorResponseSchema,
    result_to_schema,
)
from conversion_service.api.v1.dependencies import get_convert_edition_handler, verify_service_secret
from conversion_service.application.commands.convert_edition import (
    ConvertEditionCommand,
    ConvertEditionHandler,
)

router = APIRouter(tags=["conversion"])


@router.post(
    "/convert",
    response_model=ConvertResponseSchema,
    responses={
        400: {"model": ErrorResponseSchema},
        401: {"model": ErrorResponseSchema},
        422: {"model": ErrorResponseSchema},
        500: {"model": ErrorResponseSchema},
        502: {"model": ErrorResponseSchema},
    },
    dependencies=[Depends(verify_service_secret)],
)
def convert_edition(
    payload: ConvertRequestSchema,
    handler: ConvertEditionHandler = Depends(get_convert_edition_handler),
) -> ConvertResponseSchema:
    # Conversion errors are rendered as failure envelopes by the app-level handlers.
    result = handler.handle(ConvertEditionCommand(request=payload.to_domain()))
    return result_to_schema(result)
