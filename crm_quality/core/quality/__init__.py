"""
Data quality scoring.
"""

from .scorer import QualityScorer, score_quality

__all__ = ["QualityScorer", "score_quality"]
