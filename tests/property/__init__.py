"""
DDD Catalog - Property-Based Testing Suite

Property-based testing using Hypothesis to check catalog invariants over
generated marker occurrences.
"""
