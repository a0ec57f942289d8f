from __future__ import annotations

import threading
from collections import defaultdict

HISTOGRAM_BUCKETS_MS: tuple[float, ...] = (5, 10, 25, 50, 100, 250, 500, 1000, 2000, 5000)


def _sanitize_label(value: str) -> str:
    return value.replace('"', "'").replace("\\", "\\\\")


def _bucket_boundaries() -> tuple[float, ...]:
    return HISTOGRAM_BUCKETS_MS + (float("inf"),)


def _le_label(bucket: float) -> str:
    return "+Inf" if bucket == float("inf") else f"{int(bucket)}"


class MetricsRegistry:
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._http_totals: dict[tuple[str, str, int], int] = defaultdict(int)
        self._http_sum_ms: dict[tuple[str, str], float] = defaultdict(float)
        self._http_buckets: dict[tuple[str, str], dict[float, int]] = defaultdict(lambda: defaultdict(int))
        self._decision_totals: dict[tuple[str, str], int] = defaultdict(int)

    def observe_http(self, path: str, method: str, status: int, duration_ms: float) -> None:
        with self._lock:
            route_key = (path, method.upper())
            self._http_totals[(path, method.upper(), status)] += 1
            self._http_sum_ms[route_key] += duration_ms
            for bucket in _bucket_boundaries():
                if duration_ms <= bucket:
                    self._http_buckets[route_key][bucket] += 1

    def observe_decision(self, allowed: bool, reason: str) -> None:
        outcome = "allow" if allowed else "deny"
        with self._lock:
            self._decision_totals[(outcome, reason)] += 1

    def decision_count(self, allowed: bool, reason: str) -> int:
        outcome = "allow" if allowed else "deny"
        with self._lock:
            return self._decision_totals.get((outcome, reason), 0)

    def reset(self) -> None:
        with self._lock:
            self._http_totals.clear()
            self._http_sum_ms.clear()
            self._http_buckets.clear()
            self._decision_totals.clear()

    def render_prometheus(self) -> str:
        lines: list[str] = []
        with self._lock:
            lines.extend(
                [
                    "# HELP ha_http_request_total Total HTTP requests by path/method/status",
                    "# TYPE ha_http_request_total counter",
                ]
            )
            if not self._http_totals:
                lines.append('ha_http_request_total{path="none",method="none",status="0"} 0')
            else:
                for (path, method, status), count in sorted(self._http_totals.items()):
                    lines.append(
                        "ha_http_request_total"
                        f'{{path="{_sanitize_label(path)}",method="{_sanitize_label(method)}",status="{status}"}} {count}'
                    )

            lines.extend(
                [
                    "# HELP ha_http_request_duration_ms_bucket HTTP request latency histogram buckets",
                    "# TYPE ha_http_request_duration_ms_bucket histogram",
                ]
            )
            if not self._http_sum_ms:
                for bucket in _bucket_boundaries():
                    lines.append(
                        "ha_http_request_duration_ms_bucket"
                        f'{{path="none",method="none",le="{_le_label(bucket)}"}} 0'
                    )
                lines.append('ha_http_request_duration_ms_count{path="none",method="none"} 0')
                lines.append('ha_http_request_duration_ms_sum{path="none",method="none"} 0')
            else:
                for (path, method), sum_ms in sorted(self._http_sum_ms.items()):
                    bucket_counts = self._http_buckets[(path, method)]
                    total_count = 0
                    labels = f'path="{_sanitize_label(path)}",method="{_sanitize_label(method)}"'
                    for bucket in _bucket_boundaries():
                        count = bucket_counts.get(bucket, 0)
                        total_count = max(total_count, count)
                        lines.append(f'ha_http_request_duration_ms_bucket{{{labels},le="{_le_label(bucket)}"}} {count}')
                    lines.append(f"ha_http_request_duration_ms_count{{{labels}}} {total_count}")
                    lines.append(f"ha_http_request_duration_ms_sum{{{labels}}} {sum_ms:.6f}")

            lines.extend(
                [
                    "# HELP ha_authz_decision_total Authorization decisions by outcome/reason",
                    "# TYPE ha_authz_decision_total counter",
                ]
            )
            if not self._decision_totals:
                lines.append('ha_authz_decision_total{outcome="none",reason="none"} 0')
            else:
                for (outcome, reason), count in sorted(self._decision_totals.items()):
                    lines.append(
                        f'ha_authz_decision_total{{outcome="{outcome}",reason="{_sanitize_label(reason)}"}} {count}'
                    )

        return "\n".join(lines) + "\n"


METRICS = MetricsRegistry()
