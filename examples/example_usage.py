"""Example: drive the service layer directly (no Flask).

Controllers stay thin; the workflow lives in the services.
"""

import importlib
import logging

from config import get_settings_module

from src.hr_portal.hr_portal.container import build_container
from src.hr_portal.hr_portal.hr_requests.service import RequestInput


def main():
    logging.basicConfig(level=logging.INFO)
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG, zenhr_config=settings.ZENHR_CONFIG)

    employee = container.auth_service.authenticate("employee@demo.local", "employee123")
    result = container.request_service.submit(
        employee,
        RequestInput(
            type="leave",
            title="Annual leave",
            description="Family trip",
            start_date="2025-07-01",
            end_date="2025-07-05",
        ),
    )
    print("submitted:", result.request.request_id, result.request.status)
    print("provider ack:", result.connector_response)

    manager = container.auth_service.authenticate("manager@demo.local", "manager123")
    updated = container.request_service.update_status(
        manager, request_id=result.request.request_id, status="approved", comments="Enjoy"
    )
    print("now:", updated.status, "approvals:", len(updated.approvals))


if __name__ == "__main__":
    main()
