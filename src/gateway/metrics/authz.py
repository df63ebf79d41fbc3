"""Authorization decision metrics.

- Decisions: counter by action, relationship and outcome
- Malformed trees: counter of MalformedTreeError surfaced at the gateway

The RBAC core stays side-effect free; only the request layer records.
"""

from __future__ import annotations

from prometheus_client import Counter

AUTHZ_DECISIONS = Counter(
    "northstar_authz_decisions_total",
    "Authorization gate decisions at the request boundary",
    ["action", "relationship", "outcome"],
)

MALFORMED_TREE_TOTAL = Counter(
    "northstar_malformed_tree_total",
    "Requests that hit a malformed organization tree",
)


def record_decision(*, action: str, relationship: str, allowed: bool) -> None:
    AUTHZ_DECISIONS.labels(
        action=action,
        relationship=relationship,
        outcome="allowed" if allowed else "denied",
    ).inc()
