"""
Integration tests for the error toolkit.

Test components together:
- FastAPI app with the toolkit's exception handlers and tracing middleware
- Retry executor feeding its terminal failure into the formatter
"""
