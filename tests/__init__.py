"""
Test suite for Correlation Mining.

This package contains all tests organized by component:
- test_algorithms/: Tests for the CASH search, correlation models,
  distances, outlier scores and evaluation
- test_config.py / test_logging.py: Tests for the ambient configuration
"""
