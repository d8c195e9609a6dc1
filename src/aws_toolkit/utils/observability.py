"""
Shared Powertools instances for the AWS toolkit.

Clients, containers and sinks log, trace and publish their own metrics
through these singletons.
"""

from aws_lambda_powertools.logging import Logger
from aws_lambda_powertools.metrics import Metrics
from aws_lambda_powertools.tracing import Tracer

# Namespace for the toolkit's own metrics (invocations, errors, cache hits)
METRICS_NAMESPACE = 'AwsToolkit'

# Structured JSON logs; service name and level come from POWERTOOLS_SERVICE_NAME and LOG_LEVEL
logger: Logger = Logger()

# No-op outside Lambda or when POWERTOOLS_TRACE_DISABLED is "true"
tracer: Tracer = Tracer()

metrics = Metrics(namespace=METRICS_NAMESPACE)
