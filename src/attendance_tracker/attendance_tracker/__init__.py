"""Attendance Tracker package.

Tracks one attendance status per person per day and reports attendance
percentages over a calendar month or a user-defined session. Organized by
feature modules (attendance, sessions, reports, users) with a thin Flask
controller layer over service/repository layers.
"""
