"""Cross-document field relations.

A relation is a one-way annotation on the owning record. The target's value
and display name are copied at link time; editing or deleting the target later
does not touch existing relations, but a relation whose target is gone can be
reported as stale.
"""

from __future__ import annotations

import uuid
from typing import Any, Iterable

from docuextract.domain.errors.exceptions import SelfRelationError
from docuextract.domain.records.fields import get_field, parse_linkable_key
from docuextract.domain.records.models import Relation, StoredDocument

UNTITLED_DOCUMENT = "Untitled Document"


def create_relation(
    source_field: Any,
    active: StoredDocument,
    target: StoredDocument,
    target_field: Any,
) -> Relation:
    """Build a relation from ``active.<source_field>`` to ``target.<target_field>``.

    Raises:
        FieldNotLinkableError: either field is documentType.
        UnknownFieldError: either field is not in the schema.
        SelfRelationError: ``active`` and ``target`` are the same record.
    """
    source_key = parse_linkable_key(source_field)
    target_key = parse_linkable_key(target_field)
    if active.id == target.id:
        raise SelfRelationError(active.id)

    return Relation(
        id=str(uuid.uuid4()),
        source_field=source_key.value,
        target_doc_id=target.id,
        target_field=target_key.value,
        target_value=get_field(target.data, target_key).value,
        target_doc_name=target.data.dealer_name.value or UNTITLED_DOCUMENT,
    )


def add_relation(document: StoredDocument, relation: Relation) -> StoredDocument:
    return document.model_copy(update={"relations": [*document.relations, relation]})


def remove_relation(document: StoredDocument, relation_id: str) -> StoredDocument:
    """Drop the relation with ``relation_id``; an unknown id leaves the relations as they were."""
    kept = [r for r in document.relations if r.id != relation_id]
    return document.model_copy(update={"relations": kept})


def relations_for_field(document: StoredDocument, source_field: Any) -> list[Relation]:
    key = parse_linkable_key(source_field)
    return [r for r in document.relations if r.source_field == key.value]


def stale_relations(document: StoredDocument, existing_ids: Iterable[str]) -> list[Relation]:
    """Relations of ``document`` pointing at records that are no longer stored."""
    ids = set(existing_ids)
    return [r for r in document.relations if r.target_doc_id not in ids]


def link_candidates(documents: Iterable[StoredDocument], active: StoredDocument) -> list[StoredDocument]:
    """Every stored record except the active one, in store order."""
    return [d for d in documents if d.id != active.id]
