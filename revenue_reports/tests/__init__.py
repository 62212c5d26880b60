'''
Revenue Reports Test Suite

Test Modules:
-------------
- test_classification.py: won/lost vocabulary, pipeline "sold" priority,
  unrecognized statuses
- test_year_attribution.py: price selection, contract span, annualization
- test_aggregation.py: overall/account/department statistics
- test_year_filter.py: dedup, archive, sold-only, bounds and month filtering
- test_segments.py: A/B/C/D segments, segment year, bulk assignment
- test_ingestion.py: estimate export loading
- test_exports.py: report tables, XLSX export, currency formatting
- test_api_reports.py: report router contract

Running Tests:
--------------
    pip install -e ".[test]"
    pytest revenue_reports/tests -v

Configuration:
--------------
See conftest.py for shared fixtures and test configuration.
'''

__all__ = []
