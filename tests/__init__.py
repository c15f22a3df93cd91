"""
Test suite for the negative keyword uploader.

Run all tests: pytest
Run with coverage: pytest --cov=. --cov-report=html
Run unit tests only: pytest tests/unit/
Run specific file: pytest tests/unit/test_normalizer_service.py -v
"""
