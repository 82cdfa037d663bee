"""
AWS Lambda functions for the BabyTracker application.

This package contains the Lambda function handlers for the BabyTracker
backend.

Modules:
    api_handler: REST API behind the web and mobile apps
"""

# Lambda function entry points are imported directly from their modules
# so the deployment only needs the handler path.
