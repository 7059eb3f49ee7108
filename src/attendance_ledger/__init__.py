"""Attendance & leave ledger engine.

This package is organized by feature modules (punches, attendance, leave, ...)
with MySQL-backed repositories behind Protocol contracts and plain service
classes wired together in ``container.py``.
"""
