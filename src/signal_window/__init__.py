"""Sliding-window aggregation of live input signals."""
