"""
Unit tests for BabyTracker application components.

Unit tests run without network access: DynamoDB is provided by moto and
HTTP by httpx's mock transport.
"""
