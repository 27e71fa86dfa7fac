"""Library Portal package.

This package is organized by feature modules (users, attendance, bookings, ...)
with a thin Flask controller layer over service/repository layers. All
persistence and auth live in the managed backend reached through ``backend``.
"""
