"""Tests for core infrastructure (exception handler, health check)."""
