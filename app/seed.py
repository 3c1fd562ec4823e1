import logging

from sqlalchemy.orm import Session

from app.auth import hash_password
from app.config import settings
from app.models.person import Gender, Person, Placement
from app.models.user import Role, User

logger = logging.getLogger(__name__)


# Starting family: one couple, the wife attached as spouse-only
INITIAL_FAMILY = [
    {
        "id": "1",
        "name": "Jahangir Eskandari",
        "gender": Gender.MALE.value,
        "birth_date": "1880-03-15",
        "death_date": "1955-06-20",
        "photo_url": "https://picsum.photos/id/1027/200/200",
        "bio": "Patriarch of the family.",
        "location": "London, UK",
        "placement": Placement.ROOT.value,
        "spouse_id": "s1",
    },
    {
        "id": "s1",
        "name": "Fatemeh Eskandari",
        "gender": Gender.FEMALE.value,
        "birth_date": "1885-07-22",
        "death_date": "1960-11-30",
        "photo_url": "https://picsum.photos/id/1025/200/200",
        "bio": "Wife of Jahangir Eskandari.",
        "location": "London, UK",
        "placement": Placement.SPOUSE.value,
        "spouse_id": "1",
    },
]


def seed_users(db: Session) -> int:
    if db.query(User).count() > 0:
        return 0

    db.add_all([
        User(
            id="1",
            name="Owner",
            role=Role.OWNER.value,
            hashed_password=hash_password(settings.OWNER_PASSWORD),
        ),
        User(
            id="2",
            name="Contributor",
            role=Role.CONTRIBUTOR.value,
            hashed_password=hash_password(settings.CONTRIBUTOR_PASSWORD),
        ),
    ])
    db.commit()
    return 2


def seed_family(db: Session) -> int:
    if db.query(Person).count() > 0:
        return 0

    # rows first, spouse links after, so each FK target exists
    for row in INITIAL_FAMILY:
        data = {k: v for k, v in row.items() if k != "spouse_id"}
        db.add(Person(**data))
    db.flush()

    for row in INITIAL_FAMILY:
        person = db.query(Person).filter(Person.id == row["id"]).first()
        person.spouse_id = row["spouse_id"]

    db.commit()
    return len(INITIAL_FAMILY)


def seed_database(db: Session):
    users = seed_users(db)
    people = seed_family(db)
    if users or people:
        logger.info("Seeded %d users and %d persons", users, people)
