"""Attend self check-in package.

Organized by feature modules (sessions, people, geofence, checkin, ...) with a
thin Flask controller layer over the check-in service and a read-only
eligibility engine that decides whether a person may check in.
"""
