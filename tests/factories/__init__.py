"""
Test data factories.

Build game sessions in a known state (fixed rosters, deterministic word
order) so tests do not repeat setup steps.
"""
