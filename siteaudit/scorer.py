"""
Score aggregator: builds the AuditReport from the dimension results.

Weights:
  performance: 25%, seo: 25%, security: 20%,
  mobile: 15%, accessibility: 15%
"""

from datetime import datetime, timezone

from .analyzers.findings import round_half_up

WEIGHTS = {
    "performance": 0.25,
    "seo": 0.25,
    "security": 0.20,
    "mobile": 0.15,
    "accessibility": 0.15,
}

# Fixed reference scores (Norwegian average) shown next to each dimension.
BENCHMARKS = {
    "performance": 68,
    "seo": 72,
    "security": 65,
    "mobile": 78,
    "accessibility": 62,
}


def get_status(score: int) -> str:
    if score >= 90:
        return "green"
    if score >= 70:
        return "yellow"
    if score >= 50:
        return "orange"
    return "red"


def total_score(scores: dict[str, int]) -> int:
    """Weighted total of the five dimension scores, rounded half-up."""
    return round_half_up(sum(scores[name] * weight for name, weight in WEIGHTS.items()))


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def build_report(url: str, response_time: int, results: dict[str, dict]) -> dict:
    """Aggregate the dimension results into the final report."""
    categories = {}
    for name in WEIGHTS:
        result = results[name]
        categories[name] = {
            "score": result["score"],
            "status": get_status(result["score"]),
            "details": result["details"],
            "benchmark": BENCHMARKS[name],
            "metrics": result["metrics"],
        }

    return {
        "url": url,
        "analyzedAt": _timestamp(),
        "responseTime": response_time,
        "totalScore": total_score({name: c["score"] for name, c in categories.items()}),
        "benchmarks": dict(BENCHMARKS),
        "categories": categories,
    }
