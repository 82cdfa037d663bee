"""
Test package for the BabyTracker application.

Test Organization:
    unit/: Unit tests for models, services, the Lambda handler and the client
    integration/: Lifecycle tests against a deployed API stage
    conftest.py: Pytest configuration and shared fixtures
"""
