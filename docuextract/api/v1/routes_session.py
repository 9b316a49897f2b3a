from __future__ import annotations

from fastapi import APIRouter, Depends, Response

from docuextract.api.dependencies import failed_call_error, get_session
from docuextract.application.session.review_session import ReviewSession
from docuextract.domain.records.models import Relation, StoredDocument
from docuextract.models.schemas import (
    ActiveRecordResponse,
    AdvisoryResponse,
    CorrectionRequest,
    DocumentListResponse,
    DocumentSummary,
    RelationListResponse,
    RelationRequest,
    RelationView,
)

router = APIRouter(prefix="/v1/session", tags=["session"])


def _active_response(session: ReviewSession) -> ActiveRecordResponse:
    return ActiveRecordResponse(
        document=session.require_active(),
        stale_relation_ids=[r.id for r in session.stale_relations()],
    )


@router.get("/active", response_model=ActiveRecordResponse)
async def get_active(session: ReviewSession = Depends(get_session)):
    return _active_response(session)


@router.delete("/active", status_code=204)
async def discard_active(session: ReviewSession = Depends(get_session)):
    session.discard()
    return Response(status_code=204)


@router.post("/active/reprocess", response_model=StoredDocument, status_code=201)
async def reprocess_active(session: ReviewSession = Depends(get_session)):
    document = await session.reprocess()
    if document is None:
        raise failed_call_error("EXTRACTION_FAILED", session)
    return document


@router.patch("/active/fields/{field_key}", response_model=ActiveRecordResponse)
async def correct_field(field_key: str, body: CorrectionRequest, session: ReviewSession = Depends(get_session)):
    session.correct(field_key, body.value)
    return _active_response(session)


@router.get("/active/relations", response_model=RelationListResponse)
async def list_relations(session: ReviewSession = Depends(get_session)):
    stale = {r.id for r in session.stale_relations()}
    return RelationListResponse(
        relations=[RelationView(relation=r, stale=r.id in stale) for r in session.require_active().relations]
    )


@router.post("/active/relations", response_model=Relation, status_code=201)
async def create_relation(body: RelationRequest, session: ReviewSession = Depends(get_session)):
    return session.link(body.source_field, body.target_doc_id, body.target_field)


@router.delete("/active/relations/{relation_id}", status_code=204)
async def remove_relation(relation_id: str, session: ReviewSession = Depends(get_session)):
    session.unlink(relation_id)
    return Response(status_code=204)


@router.get("/link-candidates", response_model=DocumentListResponse)
async def link_candidates(session: ReviewSession = Depends(get_session)):
    candidates = session.link_candidates()
    return DocumentListResponse(total=len(candidates), items=[DocumentSummary.from_document(d) for d in candidates])


@router.get("/advisory", response_model=AdvisoryResponse)
async def get_advisory(session: ReviewSession = Depends(get_session)):
    return AdvisoryResponse(advisory=session.advisory)


@router.delete("/advisory", status_code=204)
async def dismiss_advisory(session: ReviewSession = Depends(get_session)):
    session.dismiss_advisory()
    return Response(status_code=204)
