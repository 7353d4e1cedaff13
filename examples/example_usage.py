"""Example: use the service layer directly (no Flask).

Controllers are a thin layer; the business rules live in the services.
"""

import importlib

from config import get_settings_module

from src.edutrack.edutrack.container import build_container
from src.edutrack.edutrack.users.service import MOCK_ADMIN


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG, secret_key=settings.SECRET_KEY)

    result = container.attendance_service.mark(
        MOCK_ADMIN,
        date="2024-03-10",
        records=[{"studentId": "s-001", "status": "present"}, {"studentId": "bad-id", "status": "present"}],
    )
    print(result.to_dict())
    print([r.to_dict() for r in container.attendance_service.get_by_student(MOCK_ADMIN, "s-001")])


if __name__ == "__main__":
    main()
