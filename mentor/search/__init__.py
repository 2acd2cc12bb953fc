from .aggregator import CallFailure, FanOutResult, SearchAggregator, default_providers
from .queries import CURATE, PLAN, queries_for
from .scoring import dedupe, filter_dedup_rank, is_relevant, rank, score_result

__all__ = [
    "CallFailure",
    "FanOutResult",
    "SearchAggregator",
    "default_providers",
    "CURATE",
    "PLAN",
    "queries_for",
    "dedupe",
    "filter_dedup_rank",
    "is_relevant",
    "rank",
    "score_result",
]
