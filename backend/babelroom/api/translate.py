"""
Translate API - one-off translation through the relay's cache and providers
"""
import logging

from fastapi import APIRouter, Depends, HTTPException

from babelroom.api.deps import get_services
from babelroom.config.constants import TRANSLATION_FAILED_MESSAGE
from babelroom.schemas.rooms import TranslateRequest, TranslateResponse
from babelroom.services.container import RelayServices
from babelroom.services.translation import AllProvidersFailedError

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/translate", response_model=TranslateResponse)
async def translate(req: TranslateRequest, services: RelayServices = Depends(get_services)):
    try:
        outcome = await services.relay.translate(req.text, req.source_language, req.target_language)
    except AllProvidersFailedError as e:
        logger.error(f"[TranslateAPI] {e}")
        raise HTTPException(status_code=502, detail=TRANSLATION_FAILED_MESSAGE)

    return TranslateResponse(
        success=True,
        original_text=req.text,
        translated_text=outcome.translated_text,
        source_language=req.source_language,
        target_language=req.target_language,
        cached=outcome.from_cache,
    )
