"""
Test suite for mc-bridge.

This package contains:
- Unit tests for the mapping, dedup and correlation layers
- Engine, poller and service tests against an in-memory remote store
- Remote store tests over httpx's mock transport
"""
