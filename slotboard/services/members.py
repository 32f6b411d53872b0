import logging
from uuid import uuid4

from slotboard.schemas import Member
from slotboard.storage.base import MemberStore

logger = logging.getLogger(__name__)

# (name, initials, avatar color)
DEFAULT_MEMBERS = (
    ('Ashish', 'A', 'green'),
    ('Gagan', 'G', 'blue'),
    ('He-man', 'H', 'purple'),
    ('Kaushal', 'K', 'yellow'),
    ('Main hoon na', 'MH', 'pink'),
    ('Aswini', 'AS', 'indigo'),
    ('Rahul', 'R', 'orange'),
    ('RK', 'RK', 'red'),
    ('Anjali', 'AN', 'teal'),
    ('Kumar', 'KU', 'cyan'),
)


def seed_default_members(store: MemberStore) -> list[Member]:
    """Insert the default roster, but only into an empty member store."""
    if store.list_all():
        return []

    created = [
        store.add(Member(id=str(uuid4()), name=name, initials=initials, avatar_color=avatar_color))
        for name, initials, avatar_color in DEFAULT_MEMBERS
    ]
    logger.info('Seeded %d default members', len(created))
    return created
