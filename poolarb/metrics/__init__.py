"""Prometheus metrics for the evaluation loop."""
