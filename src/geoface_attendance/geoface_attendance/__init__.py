"""Face + geofence verified attendance.

This package is organized by feature modules (face, geo, users, attendance)
with a thin Flask controller layer and service/repository layers underneath.
"""
