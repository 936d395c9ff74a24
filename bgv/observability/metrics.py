"""
Verification Metrics
--------------------
Per-method Redis counters (attempts by outcome, provider latency samples) and
a snapshot consumed by /admin/metrics. Missing keys (first boot) read as zero.
"""
from __future__ import annotations
from typing import Dict, List

from bgv.core.classifier import Outcome
from bgv.core.status_codes import VerificationMethod, method_label
from bgv.store.redis_conn import get_redis
from bgv.utils.time import now_ms

K_ATTEMPTS = "metrics:verify:{method}:attempts"        # INCR
K_OUTCOME = "metrics:verify:{method}:{outcome}"       # INCR
K_LATENCY = "metrics:verify:latencies"                # LPUSH ms
K_PROVIDER_FAIL = "metrics:verify:provider_failures"  # INCR

_MAX_SAMPLES = 500


def _percentile(data: List[float], p: float) -> float:
    """Deterministic percentile (nearest-rank on sorted data)."""
    if not data:
        return 0.0
    d = sorted(data)
    k = max(1, int(round(p * len(d))))
    return float(d[k - 1])


def record_outcome(method: str, outcome: Outcome) -> None:
    r = get_redis()
    r.incr(K_ATTEMPTS.format(method=method), 1)
    r.incr(K_OUTCOME.format(method=method, outcome=outcome.value), 1)


def record_provider_latency(ms: int) -> None:
    r = get_redis()
    r.lpush(K_LATENCY, int(ms))
    r.ltrim(K_LATENCY, 0, _MAX_SAMPLES - 1)


def increment_provider_failure() -> None:
    get_redis().incr(K_PROVIDER_FAIL, 1)


def _read_int(r, key: str) -> int:
    try:
        return int(r.get(key) or 0)
    except (TypeError, ValueError):
        return 0


def _read_latencies(r) -> List[float]:
    out: List[float] = []
    for x in r.lrange(K_LATENCY, 0, _MAX_SAMPLES - 1) or []:
        try:
            out.append(float(x))
        except (TypeError, ValueError):
            continue
    return out


def get_metrics_snapshot() -> Dict:
    """
    Usage and success rate per method, plus provider latency percentiles (ms).
    Every declared method is listed, including ones never used.
    """
    r = get_redis()
    methods = []
    total = 0
    for m in VerificationMethod:
        attempts = _read_int(r, K_ATTEMPTS.format(method=m.value))
        counts = {o.value: _read_int(r, K_OUTCOME.format(method=m.value, outcome=o.value)) for o in Outcome}
        total += attempts
        methods.append({
            "method": m.value,
            "label": method_label(m),
            "usage": attempts,
            **counts,
            "successRate": round((counts[Outcome.SUCCESS.value] / attempts) * 100.0, 3) if attempts else 0.0,
        })

    latencies = _read_latencies(r)
    return {
        "methods": methods,
        "totalVerifications": total,
        "providerFailures": _read_int(r, K_PROVIDER_FAIL),
        "p50ProviderLatencyMs": _percentile(latencies, 0.50),
        "p95ProviderLatencyMs": _percentile(latencies, 0.95),
        "snapshotAt": now_ms(),
    }
