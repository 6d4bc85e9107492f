"""HR Portal package.

Organized by feature modules (hr_requests, attendance, notifications, ...)
with a thin Flask controller layer over service/repository layers. The
external HR provider is reached only through ``zenhr.connector``.
"""
