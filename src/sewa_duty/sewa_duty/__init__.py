"""Sewa Duty package.

Feature modules (roster, sessions, attendance, shifts, reports, ...) with a thin
Flask controller layer on top of service/repository layers. The duty-session
engine itself (clock, shift calendar, record store, coverage aggregation and
session lifecycle) has no I/O and can be used without Flask or MySQL.
"""
