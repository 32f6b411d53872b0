"""Create the storage tables/files and insert the default member roster.

Usage:
    python -m slotboard.seed_members
"""
import sys

from sqlalchemy.exc import SQLAlchemyError

from slotboard.core import config
from slotboard.core.errors import UnavailableError
from slotboard.services.members import seed_default_members
from slotboard.storage.factory import build_storage


def main() -> None:
    try:
        config.validate_runtime_config()
        storage = build_storage()
        storage.initialize()
        created = seed_default_members(storage.members)
    except (RuntimeError, SQLAlchemyError, UnavailableError) as exc:
        print("Seeding failed:", exc, file=sys.stderr)
        sys.exit(1)

    if not created:
        print("Members already present; nothing to seed.")
        return
    for member in created:
        print(f"{member.id}  {member.initials:<3} {member.name}")


if __name__ == "__main__":
    main()
