"""Tests - Constraint system and mock prover test suite."""
