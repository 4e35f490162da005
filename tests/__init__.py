"""
Test Suite for the Inkwell API

Test Organization:
- conftest.py: Shared fixtures (test database, client, sample authors and posts)
- test_auth.py: Password hashing, tokens, request identity, author service
- test_diff.py: Word-level diffs
- test_edits.py: Edit log and its transactional coupling to content updates
- test_pagination.py: Pager validation, cursors and page fetching
- test_loaders.py: DataLoader batching, caching, priming and visibility
- test_graphql.py: End-to-end queries and mutations through /graphql

Running Tests:
    # Run all tests
    pytest

    # Run with coverage
    pytest --cov=inkwell --cov-report=html

    # Run specific file
    pytest tests/test_graphql.py

    # Run with verbose output
    pytest -v
"""
