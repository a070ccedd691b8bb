"""Journalytics services: trade data access and reporting."""
