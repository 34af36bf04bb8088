"""Attendance Payroll package.

Feature modules (attendance, schedules, payroll, payments, terminations, ...)
are split into model / repository / service layers, with MySQL repositories and
a thin Flask controller layer on top.
"""
