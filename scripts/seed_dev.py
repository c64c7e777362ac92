#!/usr/bin/env python
"""Seed development database with fixture messages.

Seeds the development database with the fixture messages and attachments used
by the test suite, so the admin moderation views have something to show.

Constraints:
- Refuses to run in staging or prod (WISHWALL_ENV check)
- Idempotent: messages that already exist are left untouched
- Never runs automatically (manual invocation only)

Usage:
    DATABASE_URL=... python scripts/seed_dev.py
"""

import os
import sys
from pathlib import Path

# python/ holds both the wishwall package and the shared test fixtures
_python_dir = Path(__file__).resolve().parent.parent / "python"
if str(_python_dir) not in sys.path:
    sys.path.insert(0, str(_python_dir))


def main():
    # 1. Environment check (hard fail in staging/prod)
    wishwall_env = os.getenv("WISHWALL_ENV", "local")
    if wishwall_env not in ("local", "test"):
        print(f"ERROR: seed_dev.py refuses to run in WISHWALL_ENV={wishwall_env}")
        sys.exit(1)

    # 2. Check DATABASE_URL
    database_url = os.getenv("DATABASE_URL")
    if not database_url:
        print("ERROR: DATABASE_URL environment variable must be set")
        sys.exit(1)

    # 3. Import fixture data (single source of truth)
    from sqlalchemy.orm import Session

    from tests.fixtures import FIXTURE_MESSAGES
    from wishwall.db.engine import create_db_engine
    from wishwall.db.models import MediaFile, Message, ModerationStatus

    engine = create_db_engine(database_url)

    created = []
    with Session(engine) as db:
        # 4. Idempotent seeding
        for fixture in FIXTURE_MESSAGES:
            if db.get(Message, fixture["id"]) is not None:
                continue
            message = Message(
                id=fixture["id"],
                name=fixture["name"],
                email=fixture["email"],
                message=fixture["message"],
                location_city=fixture["location_city"],
                location_country=fixture["location_country"],
                moderation_status=ModerationStatus(fixture["moderation_status"]),
            )
            for i in range(fixture["attachments"]):
                message.media_files.append(
                    MediaFile(
                        file_name=f"photo-{i}.jpg",
                        file_type="image/jpeg",
                        file_size=1024,
                        storage_path=f"messages/{fixture['id']}/photo-{i}.jpg",
                    )
                )
            db.add(message)
            created.append(fixture["id"])
        db.commit()

    # 5. Report
    db_display = database_url.split("@")[1] if "@" in database_url else database_url
    print(f"Database: {db_display}")
    print(f"WISHWALL_ENV: {wishwall_env}")
    print()
    for fixture in FIXTURE_MESSAGES:
        label = "✓ Created" if fixture["id"] in created else "• Exists"
        print(f"{label}: message {fixture['id']} ({fixture['moderation_status']})")


if __name__ == "__main__":
    main()
