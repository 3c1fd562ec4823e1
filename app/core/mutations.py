import logging
import uuid
from typing import Any, Optional

from app.core.errors import ValidationError
from app.core.record_store import PersonStore
from app.core.tree_builder import hierarchical_parent_id
from app.models.person import DESCRIPTIVE_FIELDS, Person, Placement, RelationshipType

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("name", "gender", "birth_date")

SIBLING_ALLOW = "allow"
SIBLING_REJECT = "reject"


def new_person_id() -> str:
    return f"person-{uuid.uuid4().hex}"


def _descriptive(data: dict[str, Any]) -> dict[str, Any]:
    return {k: data[k] for k in DESCRIPTIVE_FIELDS if k in data}


def _check_required(fields: dict[str, Any], *, partial: bool = False):
    for key in REQUIRED_FIELDS:
        if partial and key not in fields:
            continue
        value = fields.get(key)
        if value is None or (isinstance(value, str) and not value.strip()):
            raise ValidationError(f"Field '{key}' is required.")


# ============================================================
# ADD
# ============================================================

def add_person(
    store: PersonStore,
    person_data: dict[str, Any],
    relationship: RelationshipType,
    relative_to_id: str,
    *,
    sibling_without_parent: str = SIBLING_ALLOW,
) -> Person:
    """
    Create a person linked to ``relative_to_id``.

    SPOUSE  -> new row is spouse-only, both rows point at each other
    CHILD   -> new row's parent is the anchor
    SIBLING -> new row shares the anchor's parent (if it has one)
    PARENT  -> anchor's parent is rewritten to the new row

    The insert and every link write run in one transaction.
    """
    relationship = RelationshipType(relationship)
    fields = _descriptive(person_data)
    _check_required(fields)

    anchor = store.require(relative_to_id)

    person = Person(
        id=new_person_id(),
        placement=Placement.ROOT.value,
        parent_id=None,
        spouse_id=None,
        **fields,
    )

    with store.transaction():
        if relationship == RelationshipType.SPOUSE:
            # anchor can only hold one partner: release the previous one
            store.clear_spouse_links_to(anchor.id)

            person.placement = Placement.SPOUSE.value
            person.spouse_id = anchor.id
            store.insert(person)
            store.update_fields(anchor.id, {"spouse_id": person.id})

        elif relationship == RelationshipType.CHILD:
            person.parent_id = anchor.id
            person.placement = Placement.CHILD.value
            store.insert(person)

        elif relationship == RelationshipType.SIBLING:
            parent_id = hierarchical_parent_id(anchor)
            if parent_id:
                person.parent_id = parent_id
                person.placement = Placement.CHILD.value
            elif sibling_without_parent == SIBLING_REJECT:
                raise ValidationError(
                    f"Cannot add a sibling: {anchor.name} has no parent in the tree."
                )
            store.insert(person)

        elif relationship == RelationshipType.PARENT:
            store.insert(person)
            store.update_fields(
                anchor.id,
                {"parent_id": person.id, "placement": Placement.CHILD.value},
            )

    logger.info(
        "Added %s (%s) as %s of %s",
        person.name, person.id, relationship.value, anchor.id,
    )
    return person


# ============================================================
# UPDATE
# ============================================================

def update_person(
    store: PersonStore,
    person_id: str,
    person_data: dict[str, Any],
    spouse: Optional[dict[str, Any]] = None,
) -> Person:
    """Overwrite descriptive fields, and the spouse's too when given."""
    fields = _descriptive(person_data)
    _check_required(fields, partial=True)

    spouse_fields = None
    if spouse is not None:
        if not spouse.get("id"):
            raise ValidationError("Spouse data must include the spouse id.")
        spouse_fields = _descriptive(spouse)
        _check_required(spouse_fields, partial=True)

    current = store.require(person_id)
    if spouse is not None and spouse["id"] != current.spouse_id:
        raise ValidationError(f"{spouse['id']} is not the spouse of {current.name}.")

    with store.transaction():
        person = store.update_fields(person_id, fields)
        if spouse_fields is not None:
            store.update_fields(spouse["id"], spouse_fields)

    return person


# ============================================================
# DELETE (non-cascading)
# ============================================================

def delete_person(store: PersonStore, person_id: str) -> dict[str, str]:
    """
    Remove one person. The partner is unlinked and the children stay,
    detached, as new roots. Descendants are never removed.
    """
    person = store.require(person_id)
    name = person.name

    with store.transaction():
        store.clear_spouse_links_to(person_id)
        store.orphan_children(person_id)
        store.delete(person_id)

    logger.info("Deleted %s (%s)", name, person_id)
    return {"message": "Person deleted successfully", "person_name": name}
