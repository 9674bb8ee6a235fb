"""Incident log endpoints exercised against the test database."""
from datetime import datetime, timezone

import pytest
from pydantic import ValidationError as PydanticValidationError

from api.incident_logs import (
    create_incident_log,
    delete_incident_log,
    get_incident_log,
    get_strategies,
    list_incident_logs,
    update_incident_log,
)
from core.exceptions import NotFoundError, ValidationError
from schemas.incident_log_schema import IncidentLogCreateRequest, IncidentLogUpdateRequest


def _incident(db, user_id, day=15, **details):
    payload = IncidentLogCreateRequest(
        incident_date=datetime(2024, 1, day, 18, 0, tzinfo=timezone.utc),
        incident_time="18:05",
        **details,
    )
    return create_incident_log(payload, user_id=user_id, db=db)


def test_create_and_get(db, user_id):
    log = _incident(db, user_id, triggers="New plate", duration_minutes=25, family_impact_level=6)
    assert log.user_id == user_id
    assert log.incident_date == datetime(2024, 1, 15, 18, 0)
    assert log.created_at is not None

    fetched = get_incident_log(log.id, user_id=user_id, db=db)
    assert fetched.triggers == "New plate"
    assert fetched.duration_minutes == 25


@pytest.mark.parametrize(
    "body",
    [
        {"incident_time": "18:05"},
        {"incident_date": "2024-01-15T18:00:00Z", "incident_time": "6pm"},
        {"incident_date": "2024-01-15T18:00:00Z", "incident_time": "24:00"},
        {"incident_date": "2024-01-15T18:00:00Z", "incident_time": "18:05", "energy_level_before": 11},
    ],
)
def test_create_request_validation(body):
    with pytest.raises(PydanticValidationError):
        IncidentLogCreateRequest.model_validate(body)


def test_list_filters_by_date_most_recent_first(db, user_id, other_user_id):
    early = _incident(db, user_id, day=5)
    late = _incident(db, user_id, day=25)
    _incident(db, other_user_id, day=20)

    logs = list_incident_logs(limit=50, user_id=user_id, db=db)
    assert [l.id for l in logs] == [late.id, early.id]

    after_tenth = list_incident_logs(start_date=datetime(2024, 1, 10), limit=50, user_id=user_id, db=db)
    assert [l.id for l in after_tenth] == [late.id]

    assert [l.id for l in list_incident_logs(limit=1, user_id=user_id, db=db)] == [late.id]

    with pytest.raises(ValidationError):
        list_incident_logs(
            start_date=datetime(2024, 2, 1), end_date=datetime(2024, 1, 1), limit=50, user_id=user_id, db=db
        )


def test_update_changes_only_supplied_fields(db, user_id):
    log = _incident(db, user_id, triggers="Loud kitchen", notes="First time")
    updated = update_incident_log(
        log.id,
        IncidentLogUpdateRequest(resolution_strategy="Quiet corner", resolution_time_minutes=10),
        user_id=user_id,
        db=db,
    )
    assert updated.resolution_strategy == "Quiet corner"
    assert updated.resolution_time_minutes == 10
    assert updated.triggers == "Loud kitchen"
    assert updated.incident_time == "18:05"

    with pytest.raises(PydanticValidationError):
        IncidentLogUpdateRequest.model_validate({"incident_time": None})


def test_other_users_incident_is_not_found(db, user_id, other_user_id):
    log = _incident(db, user_id)
    with pytest.raises(NotFoundError):
        get_incident_log(log.id, user_id=other_user_id, db=db)
    with pytest.raises(NotFoundError):
        update_incident_log(log.id, IncidentLogUpdateRequest(notes="x"), user_id=other_user_id, db=db)
    with pytest.raises(NotFoundError):
        delete_incident_log(log.id, user_id=other_user_id, db=db)

    delete_incident_log(log.id, user_id=user_id, db=db)
    with pytest.raises(NotFoundError):
        get_incident_log(log.id, user_id=user_id, db=db)


def test_strategies_rank_quickest_first(db, user_id):
    _incident(db, user_id, day=1, resolution_strategy="Deep breaths", resolution_time_minutes=30)
    _incident(db, user_id, day=2, resolution_strategy="Quiet corner", resolution_time_minutes=12)
    _incident(db, user_id, day=3, resolution_strategy="Quiet corner ", resolution_time_minutes=8)
    _incident(db, user_id, day=4, resolution_strategy="Walk outside")
    _incident(db, user_id, day=5, triggers="Unresolved")

    result = get_strategies(user_id=user_id, db=db)
    assert len(result.recent_strategies) == 3
    assert result.recent_strategies[0].incident_date == datetime(2024, 1, 3, 18, 0)

    ranked = result.strategy_effectiveness
    assert [s.strategy for s in ranked] == ["Quiet corner", "Deep breaths"]
    assert ranked[0].uses == 2
    assert ranked[0].average_resolution_minutes == 10
    assert ranked[0].most_recent_use == datetime(2024, 1, 3, 18, 0)
