"""Evaluation services: metrics, rule scoring, stage mapping and qualitative tiers."""
