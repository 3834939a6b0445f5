"""
Test suite for the saved mappings service.

Run all tests: pytest
Run with coverage: pytest --cov=. --cov-report=html
Run unit tests only: pytest tests/unit/
Run specific file: pytest tests/unit/test_mapping_list_controller.py -v
"""
