"""
Test helper utilities for adaptive-eda testing.

This module provides reusable utilities for generating synthetic EDA
recordings with known SCR onsets, peaks and half-recovery points.
"""
