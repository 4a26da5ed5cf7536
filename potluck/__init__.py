"""Potluck planner API: events, days, meals, items and people with an audited write path."""
