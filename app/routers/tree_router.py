# app/routers/tree_router.py

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session

from app.auth import require_editor
from app.config import settings
from app.core import genai_client
from app.core.activity_log import log_activity
from app.core.errors import NotFoundError
from app.core.mutations import add_person, delete_person, update_person
from app.core.record_store import PersonStore
from app.core.relationship_path import find_relationship_path
from app.core.tree_builder import build_tree, infer_root_id
from app.database import get_db
from app.models.user import User
from app.schemas.person_schema import (
    AddPersonRequest,
    DeletePersonOut,
    PersonFlatOut,
    PersonOut,
    PersonUpdate,
    RelationshipPathOut,
    RelationshipPathRequest,
    TreeNodeOut,
)
from app.utils.request_info import client_ip

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Family Tree"])


# ============================================================
# STORE DEP
# ============================================================

def get_store(db: Session = Depends(get_db)) -> PersonStore:
    return PersonStore(db)


# ============================================================
# GET TREE (nested, optionally re-rooted)
# ============================================================

@router.get("/tree", response_model=TreeNodeOut)
def get_tree(
    root_id: Optional[str] = Query(None, alias="rootId"),
    collapse_depth: Optional[int] = Query(None, alias="collapseDepth", ge=0),
    store: PersonStore = Depends(get_store),
):
    """
    Without rootId the root is inferred: the head of the largest family
    fragment among people who are neither children nor spouse-only.
    """
    return build_tree(store.list(), root_id=root_id, collapse_depth=collapse_depth)


# ============================================================
# PEOPLE (flat)
# ============================================================

@router.get("/persons", response_model=list[PersonFlatOut])
def list_persons(store: PersonStore = Depends(get_store)):
    return store.list()


@router.get("/persons/{person_id}", response_model=PersonOut)
def get_person(person_id: str, store: PersonStore = Depends(get_store)):
    return store.require(person_id)


# ============================================================
# ADD
# ============================================================

@router.post("/persons/add", response_model=PersonOut, status_code=201)
def add_relative(
    payload: AddPersonRequest,
    request: Request,
    store: PersonStore = Depends(get_store),
    current_user: User = Depends(require_editor),
):
    person = add_person(
        store,
        payload.person_data.model_dump(),
        payload.relationship,
        payload.relative_to_id,
        sibling_without_parent=settings.SIBLING_WITHOUT_PARENT,
    )

    log_activity(
        store.db,
        client_ip(request),
        "CREATE_PERSON",
        f"Added new person: {person.name}",
        current_user,
    )
    return person


# ============================================================
# UPDATE
# ============================================================

@router.put("/persons/{person_id}", response_model=PersonOut)
def edit_person(
    person_id: str,
    payload: PersonUpdate,
    request: Request,
    store: PersonStore = Depends(get_store),
    current_user: User = Depends(require_editor),
):
    data = payload.model_dump(exclude_unset=True, exclude={"spouse"})
    spouse = payload.spouse.model_dump(exclude_unset=True) if payload.spouse else None

    person = update_person(store, person_id, data, spouse=spouse)

    log_activity(
        store.db,
        client_ip(request),
        "UPDATE_PERSON",
        f"Updated details for: {person.name}",
        current_user,
    )
    return person


# ============================================================
# DELETE (children become roots)
# ============================================================

@router.delete("/persons/{person_id}", response_model=DeletePersonOut)
def remove_person(
    person_id: str,
    request: Request,
    store: PersonStore = Depends(get_store),
    current_user: User = Depends(require_editor),
):
    store.require(person_id)

    # The default tree must keep its head
    if infer_root_id(store.list()) == person_id:
        raise HTTPException(400, "The root of the default tree cannot be deleted")

    result = delete_person(store, person_id)

    log_activity(
        store.db,
        client_ip(request),
        "DELETE_PERSON",
        f"Deleted person: {result['person_name']}",
        current_user,
    )
    return result


# ============================================================
# RELATIONSHIP PATH
# ============================================================

@router.post("/relationship-path", response_model=RelationshipPathOut)
def relationship_path(
    payload: RelationshipPathRequest,
    store: PersonStore = Depends(get_store),
):
    records = store.list()
    known = {r.id for r in records}

    for person_id in (payload.person1_id, payload.person2_id):
        if person_id not in known:
            raise NotFoundError(f"Person with id {person_id} not found.")

    path = find_relationship_path(records, payload.person1_id, payload.person2_id)
    if path is None:
        return {"path": None, "description": None}

    return {
        "path": path,
        "description": genai_client.describe_relationship(path, payload.language),
    }
