"""
Alert Matching Package

Confidence-scored matching of parsed alerts against candidate transactions.

Key Components:
- similarity: Levenshtein distance and normalized string similarity
- scorer: MatchScorer, weighted four-factor confidence and stable ranking
- reconciler: AlertReconciler, batch workflow with running accuracy metrics

Scoring Factors (default weights):
- Amount within 2% tolerance: 0.4
- Exact masked account match: 0.3
- Timestamps within 15 minutes: 0.2
- Description similarity (continuous): 0.1

A result is matched when its confidence reaches the threshold (0.6).
"""

from .reconciler import AlertReconciler, ReconciliationMetrics, generate_match_summary
from .scorer import MatchScorer
from .similarity import levenshtein_distance, similarity

__all__ = [
    "AlertReconciler",
    "MatchScorer",
    "ReconciliationMetrics",
    "generate_match_summary",
    "levenshtein_distance",
    "similarity",
]
