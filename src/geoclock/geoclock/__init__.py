"""GeoClock package.

Organized by feature modules (employees, sites, attendance, overtime, ...)
with a thin Flask/router layer on top of service/repository layers.
"""
