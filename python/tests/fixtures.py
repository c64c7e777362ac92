"""Fixture messages shared by tests and the dev seed script.

One source of truth for the moderation scenario used across the suite:
five messages, two approved, one rejected, two pending, three with
attachments, two distinct countries.
"""

from uuid import UUID

FIXTURE_MESSAGES: list[dict] = [
    {
        "id": UUID("0b6f1c2e-3a51-4c4e-9a0f-000000000001"),
        "name": "Ana",
        "email": "ana@example.com",
        "message": "Happy birthday from Lisbon!",
        "location_city": "Lisbon",
        "location_country": "Portugal",
        "moderation_status": "approved",
        "attachments": 2,
    },
    {
        "id": UUID("0b6f1c2e-3a51-4c4e-9a0f-000000000002"),
        "name": "Ben",
        "email": None,
        "message": "Many happy returns.",
        "location_city": "Porto",
        "location_country": "Portugal",
        "moderation_status": "approved",
        "attachments": 0,
    },
    {
        "id": UUID("0b6f1c2e-3a51-4c4e-9a0f-000000000003"),
        "name": "Chloe",
        "email": "chloe@example.com",
        "message": "Not suitable for the wall.",
        "location_city": None,
        "location_country": None,
        "moderation_status": "rejected",
        "attachments": 1,
    },
    {
        "id": UUID("0b6f1c2e-3a51-4c4e-9a0f-000000000004"),
        "name": "Dev",
        "email": "dev@example.com",
        "message": "Cheers from Berlin",
        "location_city": "Berlin",
        "location_country": "Germany",
        "moderation_status": "pending",
        "attachments": 1,
    },
    {
        "id": UUID("0b6f1c2e-3a51-4c4e-9a0f-000000000005"),
        "name": "Eve",
        "email": None,
        "message": "Waiting for review",
        "location_city": None,
        "location_country": None,
        "moderation_status": "pending",
        "attachments": 0,
    },
]

FIXTURE_STATS = {
    "total": 5,
    "approved": 2,
    "pending": 2,
    "rejected": 1,
    "withMedia": 3,
    "countries": 2,
}
