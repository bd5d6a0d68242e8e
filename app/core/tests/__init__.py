"""
Tests for core app.

This package contains test modules for:
- test_services.py: ServiceResult and BaseService tests
- test_exceptions.py: Application exception tests
- test_views.py: Health check endpoint tests
- test_settings.py: Environment file defaults
"""
