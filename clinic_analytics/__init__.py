"""Clinic analytics and reporting engine."""
