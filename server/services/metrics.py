from prometheus_client import Counter, Gauge

NAMESPACE = "alertrecorder"

WEBHOOKS_RECEIVED = Counter(
    "webhooks_received_total",
    "Total number of webhooks received by this instance",
    namespace=NAMESPACE,
)

INVALID_WEBHOOKS = Counter(
    "invalid_webhooks_total",
    "Total number of invalid webhooks received by this instance",
    namespace=NAMESPACE,
)

ALERTS_RECEIVED = Counter(
    "alerts_received_total",
    "Total number of alerts received by this instance",
    ["receiver", "status"],
    namespace=NAMESPACE,
)

ALERTS_SAVED = Counter(
    "alerts_saved_total",
    "Total number of alerts saved to the database",
    ["receiver", "status"],
    namespace=NAMESPACE,
)

ALERTS_SAVING_FAILURES = Counter(
    "alerts_saving_failures_total",
    "Total number of alerts that could not be saved to the database",
    ["receiver", "status"],
    namespace=NAMESPACE,
)

# 1 when the last connectivity probe succeeded, 0 otherwise
DATABASE_UP = Gauge(
    "database_up",
    "Whether the database is reachable",
    namespace=NAMESPACE,
)
