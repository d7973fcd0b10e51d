"""Tests for step-orchestrator."""
