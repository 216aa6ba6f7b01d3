"""Office attendance tracker package.

Organized by feature modules (users, delegations, attendance, capacity,
analytics) with thin Flask JSON controllers on top of service/repository layers.
"""
