"""Shared helpers for the i18n generator test suite."""
