"""Correlation analyzer: what happened in the hours before each symptom episode.

For a symptom, every logged episode opens a look-back window. Events are
counted once per episode they fall into, so an event logged ten times
before one episode still counts as a single co-occurrence. Only events
present before at least half of the episodes are reported.
"""

import math
from datetime import timedelta
from typing import Dict, List, Set, Tuple

from sqlalchemy.orm import Session

from core.config import DEFAULT_SETTINGS, InferenceSettings
from core.logger import get_logger
from core.numeric import round_half_up
from core.repository import AppendOnlyRepository
from database import models
from schemas.insight_schema import CorrelationResult

logger = get_logger("services.correlation_analyzer")


def events_in_window(session: Session, episode: models.Symptom, window: timedelta) -> List[models.Event]:
    """Return events with `episode.timestamp - window <= ts <= episode.timestamp`."""
    start = episode.timestamp - window
    return AppendOnlyRepository(models.Event, session).between(start, episode.timestamp)


class CorrelationAnalyzer:
    """Finds events that repeatedly precede a symptom.

    Methods
    -------
    find_correlations(store, symptom_name)
        Read the store and return the correlated events, most frequent first.
    """

    def __init__(self, settings: InferenceSettings = DEFAULT_SETTINGS):
        self.settings = settings

    @property
    def window(self) -> timedelta:
        return timedelta(hours=self.settings.correlation_window_hours)

    def threshold(self, total_episodes: int) -> int:
        """Minimum number of distinct episodes an event must precede."""
        return math.ceil(total_episodes * self.settings.correlation_episode_ratio)

    def _analyze(self, session: Session, symptom_name: str) -> List[CorrelationResult]:
        episodes = AppendOnlyRepository(models.Symptom, session).where(models.Symptom.name == symptom_name)
        total = len(episodes)
        if total == 0:
            return []
        threshold = self.threshold(total)

        seen: Dict[Tuple[str, str], Set[int]] = {}
        for episode in episodes:
            for ev in events_in_window(session, episode, self.window):
                seen.setdefault((ev.name, ev.type), set()).add(episode.id)

        results = []
        for (name, type_), episode_ids in seen.items():
            count = len(episode_ids)
            if count < threshold:
                continue
            results.append(CorrelationResult(
                event_name=name,
                event_type=type_,
                occurrences=count,
                symptom_episodes=total,
                percentage_of_episodes=int(round_half_up(count / total * 100)),
            ))
        results.sort(key=lambda r: (-r.occurrences, r.event_name))
        logger.info(
            "Correlations for %s: %s episodes, threshold=%s, %s events kept",
            symptom_name, total, threshold, len(results),
        )
        return results

    def find_correlations(self, store, symptom_name: str) -> List[CorrelationResult]:
        """Return events co-occurring with at least `ceil(N * ratio)` distinct episodes.

        Args:
            store: Event store exposing `read(fn, default)`.
            symptom_name: Exact symptom name as logged.

        Returns:
            List of `CorrelationResult`, empty when there are no episodes or the
            store is unavailable.
        """
        return store.read(lambda session: self._analyze(session, symptom_name), default=[])


correlation_analyzer = CorrelationAnalyzer()
