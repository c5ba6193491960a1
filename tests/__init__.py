"""OMNITRACE Test Suite

Test organization:
- unit/: Unit tests, one directory per package area
  - engine/: Segment derivation and event queries
  - analytics/: Smart merging, metrics, score, heatmap, insights, summary
  - omnibrain/: Intents, fact templates, modes, help search, assistant
  - storage/, session/, privacy/, search/, forensics/: Collaborators
- unit/test_cli.py: End-to-end CLI runs against a temporary database

Running tests:
    # All tests
    pytest

    # Specific area
    pytest tests/unit/omnibrain/

    # With coverage
    pytest --cov=omnitrace --cov-report=term-missing
"""
