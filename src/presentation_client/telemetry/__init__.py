"""Telemetry for presentation-client.

- system/: Operational logger (stderr + optional JSONL file)
"""
