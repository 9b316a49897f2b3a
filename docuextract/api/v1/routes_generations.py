from __future__ import annotations

from fastapi import APIRouter, Depends

from docuextract.api.dependencies import failed_call_error, get_session
from docuextract.application.session.preferences import Theme
from docuextract.application.session.review_session import ReviewSession
from docuextract.domain.records.models import StoredDocument
from docuextract.models.schemas import GenerationRequest, GenerationResponse, ThemeRequest, ThemeResponse

router = APIRouter(prefix="/v1", tags=["generations"])


@router.post("/generations", response_model=GenerationResponse, status_code=201)
async def generate(body: GenerationRequest, session: ReviewSession = Depends(get_session)):
    image = await session.generate_image(body.prompt)
    if image is None:
        raise failed_call_error("GENERATION_FAILED", session)
    return GenerationResponse(image=image)


@router.post("/generations/process", response_model=StoredDocument, status_code=201)
async def process_generated(session: ReviewSession = Depends(get_session)):
    document = await session.process_generated_image()
    if document is None:
        raise failed_call_error("EXTRACTION_FAILED", session)
    return document


@router.get("/preferences/theme", response_model=ThemeResponse)
async def get_theme(session: ReviewSession = Depends(get_session)):
    return ThemeResponse(theme=session.theme)


@router.put("/preferences/theme", response_model=ThemeResponse)
async def set_theme(body: ThemeRequest, session: ReviewSession = Depends(get_session)):
    return ThemeResponse(theme=session.set_theme(Theme(body.theme)))
