"""
Test Suite for Record Exporter.

Test organization:
    - unit/: Unit tests for individual components
    - integration/: End-to-end export tests
    - fixtures/: Shared test fixtures and sample data

Running Tests:
    pytest tests/                           # All tests
    pytest tests/unit/                      # Unit tests only
    pytest tests/integration/               # Integration tests only
    pytest --cov=src/record_exporter        # With coverage
"""
