"""Dayflow HR package.

Feature modules (auth, employees, attendance, leave, payroll) each carry a thin
Flask controller on top of service/repository layers.
"""
