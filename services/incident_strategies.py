"""Ranking of the strategies caregivers used to resolve incidents."""

from typing import Dict, Iterable, List

from core.logger import get_logger
from schemas.incident_log_schema import IncidentLogResponse, StrategySummary
from services.rounding import round_half_up

logger = get_logger("services.incident_strategies")


def rank_strategies(logs: Iterable[IncidentLogResponse]) -> List[StrategySummary]:
    """Group incidents by resolution strategy, quickest average resolution first.

    Strategy names are compared after trimming surrounding whitespace.
    Incidents without a strategy or without a resolution time are skipped.
    Ties go to the more often used strategy, then to the name.
    """
    grouped: Dict[str, List[IncidentLogResponse]] = {}
    for log in logs:
        strategy = (log.resolution_strategy or "").strip()
        if not strategy or log.resolution_time_minutes is None:
            continue
        grouped.setdefault(strategy, []).append(log)

    summaries = [
        StrategySummary(
            strategy=strategy,
            uses=len(entries),
            average_resolution_minutes=round_half_up(
                sum(e.resolution_time_minutes for e in entries) / len(entries), 1
            ),
            most_recent_use=max(e.incident_date for e in entries),
        )
        for strategy, entries in grouped.items()
    ]
    summaries.sort(key=lambda s: (s.average_resolution_minutes, -s.uses, s.strategy))
    logger.debug("Ranked %s strategies", len(summaries))
    return summaries
