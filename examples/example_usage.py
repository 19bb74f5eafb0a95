"""Example: ask the eligibility engine directly (no Flask).

Uses the demo data from database/seed.sql.
"""

import importlib

from config import get_settings_module

from src.attend.attend.checkin.model import EligibilityRequest
from src.attend.attend.container import build_container
from src.attend.attend.core.enums import CheckinMethod
from src.attend.attend.geofence.model import Point
from src.attend.attend.main import eligibility_config_from


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG, eligibility=eligibility_config_from(settings))

    verdict = container.eligibility_engine.compute_eligibility(
        EligibilityRequest(
            org_id=1,
            session_id=1,
            method=CheckinMethod.GEO,
            user_id="demo-user-ada",
            point=Point(lat=40.7510, lng=-73.9857, accuracy_m=15),
        )
    )
    print(verdict.allowed, verdict.reason, verdict.message)


if __name__ == "__main__":
    main()
