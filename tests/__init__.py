"""
Test suite for the back-office import wizard.

Run all tests: pytest
Run with coverage: pytest --cov=. --cov-report=html
Run unit tests only: pytest tests/unit/
Run specific file: pytest tests/unit/test_wizard_service.py -v
"""
