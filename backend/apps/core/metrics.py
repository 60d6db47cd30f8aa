from __future__ import annotations

from prometheus_client import Counter

# Flag submissions
flag_attempts_total = Counter(
    "flaghive_flag_attempts_total",
    "Total flag attempts recorded in the ledger",
    labelnames=("success",),
)

challenges_solved_total = Counter(
    "flaghive_challenges_solved_total",
    "Total challenges transitioned to solved",
)

# Auth
logins_total = Counter(
    "flaghive_logins_total",
    "Login attempts",
    labelnames=("outcome",),
)
