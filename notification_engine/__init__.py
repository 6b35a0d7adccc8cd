"""Notification prioritization and delivery engine."""
