"""
Pytest fixtures for the HttpEnvelope test suite.

- http_mocking: route tables and response builders over httpx.MockTransport
"""
