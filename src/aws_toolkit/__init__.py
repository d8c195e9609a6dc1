"""
AWS Toolkit - AWS adapters for microservices.

This package contains the building blocks for running and calling
microservice components on AWS:

- connect: AWS connection and credential resolution, ARN parsing
- clients: AWS Lambda invocation clients
- container: Lambda function containers that dispatch commands to actions
- commands: Commands and command sets exposed by controllers
- log: Buffered logging with a CloudWatch Logs sink
- count: Performance counters with a CloudWatch Metrics sink
"""

__version__ = "1.0.0"

__all__ = [
    "__version__",
]
