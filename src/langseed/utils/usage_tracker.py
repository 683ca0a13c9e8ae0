"""In-memory LLM usage tracker.

Every generator call logs one query record (user, query type, model, token
counts). The tracker keeps aggregates per user and query type so callers can
report token spend, and can dump its records to a JSON file.
"""

import json
import logging
import threading
from collections import defaultdict
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, List, Optional, Union

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)


class LLMQuery(BaseModel):
    """One logged generator call."""

    user_id: Optional[str] = None
    query_type: str
    model: str
    input_tokens: Optional[int] = None
    output_tokens: Optional[int] = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class UsageSummary(BaseModel):
    """Aggregated token usage."""

    total_input_tokens: int = 0
    total_output_tokens: int = 0
    query_count: int = 0


class UsageTracker:
    """Thread-safe analytics sink for generator calls.

    Safe to share between the importer's worker threads; all mutation
    happens under one lock.
    """

    def __init__(self, stats_file: Optional[Union[str, Path]] = None):
        """Initialize usage tracker.

        Args:
            stats_file: Optional path `save()` writes the query log to
        """
        self.stats_file = Path(stats_file) if stats_file else None
        self._queries: List[LLMQuery] = []
        self._lock = threading.Lock()

    def log_query(
        self,
        user_id: Optional[str],
        query_type: str,
        model: str,
        input_tokens: Optional[int] = None,
        output_tokens: Optional[int] = None,
    ) -> LLMQuery:
        query = LLMQuery(
            user_id=user_id,
            query_type=query_type,
            model=model,
            input_tokens=input_tokens,
            output_tokens=output_tokens,
        )
        with self._lock:
            self._queries.append(query)

        logger.debug(
            f"Logged {query_type} query: model={model}, "
            f"input_tokens={input_tokens}, output_tokens={output_tokens}",
            extra={"user_id": user_id, "query_type": query_type},
        )
        return query

    @property
    def queries(self) -> List[LLMQuery]:
        with self._lock:
            return list(self._queries)

    def get_user_usage(self, user_id: Optional[str]) -> UsageSummary:
        """Total usage for one user."""
        return self._summarize(q for q in self.queries if q.user_id == user_id)

    def get_usage_by_type(self, user_id: Optional[str] = None) -> Dict[str, UsageSummary]:
        """Usage grouped by query type, optionally restricted to one user."""
        grouped: Dict[str, List[LLMQuery]] = defaultdict(list)
        for query in self.queries:
            if user_id is None or query.user_id == user_id:
                grouped[query.query_type].append(query)
        return {query_type: self._summarize(items) for query_type, items in grouped.items()}

    def get_total_usage(self) -> UsageSummary:
        """Usage across all users."""
        return self._summarize(self.queries)

    def save(self, path: Optional[Union[str, Path]] = None) -> Path:
        """Write the query log as JSON.

        Raises:
            ValueError: If no path was given here or at construction
        """
        target = Path(path) if path else self.stats_file
        if target is None:
            raise ValueError("No stats file configured for UsageTracker.save()")

        target.parent.mkdir(parents=True, exist_ok=True)
        records = [query.model_dump(mode="json") for query in self.queries]
        with open(target, "w", encoding="utf-8") as f:
            json.dump(records, f, ensure_ascii=False, indent=2)

        logger.info(f"Saved {len(records)} LLM queries to {target}")
        return target

    @staticmethod
    def _summarize(queries) -> UsageSummary:
        summary = UsageSummary()
        for query in queries:
            summary.total_input_tokens += query.input_tokens or 0
            summary.total_output_tokens += query.output_tokens or 0
            summary.query_count += 1
        return summary
