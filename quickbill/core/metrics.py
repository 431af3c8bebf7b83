from prometheus_client import Counter, Histogram


KAFKA_PRODUCER_START_TOTAL = Counter(
    "quickbill_kafka_producer_start_total",
    "Kafka producer start events",
    ["service", "result"],
)

KAFKA_PRODUCER_STOP_TOTAL = Counter(
    "quickbill_kafka_producer_stop_total",
    "Kafka producer stop events",
    ["service", "result"],
)

KAFKA_PRODUCER_MESSAGES_TOTAL = Counter(
    "quickbill_kafka_producer_messages_total",
    "Kafka producer send events",
    ["service", "result"],
)

STORAGE_UPLOADS_TOTAL = Counter(
    "quickbill_storage_uploads_total",
    "Product image uploads to blob storage",
    ["service", "status"],
)

PRODUCTS_DB_OPERATIONS_TOTAL = Counter(
    "quickbill_products_db_operations_total",
    "Products DB operations",
    ["service", "operation", "status"],
)

ORDERS_DB_OPERATIONS_TOTAL = Counter(
    "quickbill_orders_db_operations_total",
    "Orders DB operations",
    ["service", "operation", "status"],
)

ORDERS_SERVICE_OPERATIONS_TOTAL = Counter(
    "quickbill_orders_service_operations_total",
    "Order service operations",
    ["service", "operation", "status"],
)

SUBSCRIPTIONS_DB_OPERATIONS_TOTAL = Counter(
    "quickbill_subscriptions_db_operations_total",
    "Subscriptions DB operations",
    ["service", "operation", "status"],
)

AUTH_TOKEN_VALIDATION_TOTAL = Counter(
    "quickbill_auth_token_validation_total",
    "Authentication token validation events",
    ["service", "result"],
)

PERMISSION_CHECK_TOTAL = Counter(
    "quickbill_permission_check_total",
    "Permission check events",
    ["service", "permission", "result"],
)

DOMAIN_ERRORS_TOTAL = Counter(
    "quickbill_domain_errors_total",
    "Pricing and status errors returned to clients",
    ["service", "error"],
)

HTTP_REQUESTS_TOTAL = Counter(
    "quickbill_http_requests_total",
    "Total HTTP requests",
    ["service", "method", "path", "status_code"],
)

HTTP_REQUEST_DURATION_SECONDS = Histogram(
    "quickbill_http_request_duration_seconds",
    "HTTP request latency in seconds",
    ["service", "method", "path"],
)
