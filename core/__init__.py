"""Core application for the hospital backend.

This package contains the models, serializers, services, views and route
registrations of the role based hospital management API.
"""
