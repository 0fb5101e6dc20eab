"""
Tests for the Product Allocation app.
"""
