"""Test doubles for running the oracle without a native engine."""
