"""
E2E Tests - Full User Journey End-to-End Tests

These tests simulate complete user flows through the system.
They test the entire pipeline from input to output.

Usage:
    pytest tests/e2e/
"""
