"""
Unit tests for the error toolkit.

Test individual components in isolation:
- AppError construction, classification and cause lookup
- Formatter (context merge, timestamps, cause recursion, truncation)
- Error catalog factories
- Backoff delay computation
- Retry executor state machine (with injected sleep and randomness)
"""
