"""HRMS attendance package.

Organized by feature modules (restrictions, attendance, settings, ...) with
pure calculation code at the center, Protocol repositories around it and a
thin Flask controller layer on top.
"""
