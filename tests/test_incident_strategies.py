"""Tests for incident strategy ranking."""
from datetime import datetime

from schemas.incident_log_schema import IncidentLogResponse
from services.incident_strategies import rank_strategies


def _log(log_id, strategy, minutes, day=1):
    return IncidentLogResponse(
        id=log_id,
        user_id=1,
        incident_date=datetime(2024, 3, day, 19, 0),
        incident_time="19:00",
        resolution_strategy=strategy,
        resolution_time_minutes=minutes,
    )


def test_groups_trimmed_names_and_averages():
    ranked = rank_strategies([
        _log(1, "Quiet corner", 10, day=2),
        _log(2, "  Quiet corner", 15, day=9),
        _log(3, "Music", 20, day=4),
    ])
    assert [s.strategy for s in ranked] == ["Quiet corner", "Music"]
    assert ranked[0].uses == 2
    assert ranked[0].average_resolution_minutes == 12.5
    assert ranked[0].most_recent_use == datetime(2024, 3, 9, 19, 0)


def test_skips_incidents_without_strategy_or_time():
    ranked = rank_strategies([_log(1, None, 5), _log(2, "   ", 5), _log(3, "Music", None), _log(4, "Hug", 7)])
    assert [s.strategy for s in ranked] == ["Hug"]


def test_average_is_rounded_to_one_decimal():
    ranked = rank_strategies([_log(1, "Hug", 1), _log(2, "Hug", 1), _log(3, "Hug", 2)])
    assert ranked[0].average_resolution_minutes == 1.3


def test_ties_go_to_more_used_then_name():
    ranked = rank_strategies([
        _log(1, "Walk", 10),
        _log(2, "Bath", 10),
        _log(3, "Music", 5),
        _log(4, "Music", 15),
    ])
    assert [s.strategy for s in ranked] == ["Music", "Bath", "Walk"]


def test_no_incidents():
    assert rank_strategies([]) == []
