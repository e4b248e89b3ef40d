# tests/property/__init__.py
"""Property-based tests for sinkfields.

Property-based testing validates invariants that must hold for ALL inputs,
not just the specific examples we think of.

Test categories:
- resolution/: Key/non-key partition, determinism, error taxonomy
"""
