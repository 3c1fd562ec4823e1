import logging
from contextlib import contextmanager
from typing import Any, Iterator, Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session

from app.core.errors import ConflictError, NotFoundError, ValidationError
from app.core.tree_builder import SPOUSE_SENTINEL
from app.models.person import DESCRIPTIVE_FIELDS, Person, Placement

logger = logging.getLogger(__name__)

WRITABLE_FIELDS = set(DESCRIPTIVE_FIELDS) | {"parent_id", "spouse_id", "placement"}


class PersonStore:
    """
    CRUD over the persons table through an explicit Session.

    Every write commits on its own unless it runs inside ``transaction()``,
    in which case it is only flushed and the outer block commits (or rolls
    back) all of them together.
    """

    def __init__(self, db: Session):
        self.db = db
        self._in_transaction = False

    # ============================================================
    # TRANSACTION SCOPE
    # ============================================================

    @contextmanager
    def transaction(self) -> Iterator["PersonStore"]:
        if self._in_transaction:
            # nested: the outermost block owns commit/rollback
            yield self
            return

        self._in_transaction = True
        try:
            yield self
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        finally:
            self._in_transaction = False

    def _write_done(self):
        if self._in_transaction:
            self.db.flush()
        else:
            self.db.commit()

    # ============================================================
    # READS
    # ============================================================

    def get(self, person_id: str) -> Optional[Person]:
        if not person_id:
            return None
        return self.db.query(Person).filter(Person.id == person_id).first()

    def require(self, person_id: str) -> Person:
        person = self.get(person_id)
        if not person:
            raise NotFoundError(f"Person with id {person_id} not found.")
        return person

    def list(self) -> list[Person]:
        # Stable order: root tie-breaks and child order depend on it
        return (
            self.db.query(Person)
            .order_by(Person.created_at.asc(), Person.id.asc())
            .all()
        )

    # ============================================================
    # WRITES
    # ============================================================

    def insert(self, person: Person) -> Person:
        if self.get(person.id) is not None:
            raise ConflictError(f"Person with id {person.id} already exists.")

        self.db.add(person)
        self._write_done()
        return person

    def update_fields(self, person_id: str, fields: dict[str, Any]) -> Person:
        unknown = set(fields) - WRITABLE_FIELDS
        if unknown:
            raise ValidationError(f"Unknown person fields: {', '.join(sorted(unknown))}")

        person = self.require(person_id)
        for key, value in fields.items():
            setattr(person, key, value)

        self._write_done()
        return person

    def delete(self, person_id: str) -> Person:
        person = self.require(person_id)
        self.db.delete(person)
        self._write_done()
        return person

    def orphan_children(self, parent_id: str) -> int:
        """Detach every child of ``parent_id``; they become roots."""
        count = (
            self.db.query(Person)
            .filter(Person.parent_id == parent_id)
            .update(
                {
                    Person.parent_id: None,
                    Person.placement: Placement.ROOT.value,
                },
                synchronize_session="fetch",
            )
        )
        self._write_done()

        if count:
            logger.info("Orphaned %d children of %s", count, parent_id)
        return count

    def clear_spouse_links_to(self, person_id: str) -> int:
        """
        Null out spouse_id on every row that points at ``person_id``.

        A released spouse-only row has no other way into the tree, so it
        becomes a root.
        """
        pointing = self.db.query(Person).filter(Person.spouse_id == person_id)
        spouse_only = or_(
            Person.placement == Placement.SPOUSE.value,
            Person.parent_id == SPOUSE_SENTINEL,
        )

        released = pointing.filter(spouse_only).update(
            {
                Person.spouse_id: None,
                Person.parent_id: None,
                Person.placement: Placement.ROOT.value,
            },
            synchronize_session="fetch",
        )
        count = released + pointing.update(
            {Person.spouse_id: None}, synchronize_session="fetch"
        )
        self._write_done()

        if released:
            logger.info("Released %d spouse-only partner(s) of %s as roots", released, person_id)
        return count
