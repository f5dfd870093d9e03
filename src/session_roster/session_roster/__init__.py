"""Session roster package.

Feature modules (sessions, roles, staff_attendance, ...) each carry a
model, a repository Protocol with its MySQL implementation, a service
and a thin Flask controller.
"""
