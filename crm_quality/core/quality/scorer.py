"""
QualityScorer - turns job counters into quality percentages.
"""

from decimal import ROUND_HALF_UP, Decimal

from crm_quality.core.models import CleansingJob, QualityMetrics

ONE_DECIMAL = Decimal("0.1")


def _round_half_up(value: Decimal) -> float:
    return float(value.quantize(ONE_DECIMAL, rounding=ROUND_HALF_UP))


def _percent(part: int, total: int) -> float:
    return _round_half_up(Decimal(part) * 100 / Decimal(total))


class QualityScorer:
    """
    Aggregates record counts into completeness, accuracy, uniqueness,
    consistency and overall percentages, rounded half-up to one decimal
    (6.25 becomes 6.3).

    completeness is the same value as accuracy; no separate completeness
    signal is computed.
    """

    def score(self, total: int, validated: int, errors: int, duplicates: int) -> QualityMetrics:
        """
        Score a set of counters.

        Args:
            total: Records evaluated
            validated: Records without issues
            errors: Records with at least one issue
            duplicates: Job-wide duplicate occurrences

        Returns:
            QualityMetrics, all zero when total is 0
        """
        if total <= 0:
            return QualityMetrics()

        accuracy = _percent(validated, total)
        uniqueness = _percent(total - duplicates, total)
        consistency = _percent(total - errors, total)
        completeness = accuracy

        overall = _round_half_up(
            sum(Decimal(str(v)) for v in (completeness, accuracy, uniqueness, consistency)) / 4
        )

        return QualityMetrics(
            completeness=completeness,
            accuracy=accuracy,
            uniqueness=uniqueness,
            consistency=consistency,
            overall=overall,
        )

    def score_job(self, job: CleansingJob) -> QualityMetrics:
        """Score a job's counters over its processed records."""
        return self.score(
            total=job.processed_records,
            validated=job.validated_records,
            errors=job.error_count,
            duplicates=job.duplicate_records,
        )


def score_quality(total: int, validated: int, errors: int, duplicates: int) -> QualityMetrics:
    return QualityScorer().score(total, validated, errors, duplicates)
