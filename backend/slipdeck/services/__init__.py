"""Reconciliation engines and their state containers."""
