"""Staff attendance dashboard package.

Organized by feature modules (users, attendance, qr, payroll, dashboard, ...)
with a thin Flask controller layer over service/repository layers.
"""
