"""
Quote Feed Test Suite
=====================

This package contains tests for the Quote Feed including:
- Unit tests for individual components
- Integration tests for the feed flow and command line
"""
