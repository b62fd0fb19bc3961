"""
Test suite for ClaimGuard.

Unit tests for every analyzer, the fee calculator, letters and explanations,
plus API and CLI tests.
"""
