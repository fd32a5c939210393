"""
Login page end-to-end suite.

Keeps `loginsuite` importable to support:
  - IDE navigation
  - programmatic runners (e.g., `run_tests.py`)
  - unit tests of the framework layer
"""
