"""Roblox visit-count aggregation API."""
