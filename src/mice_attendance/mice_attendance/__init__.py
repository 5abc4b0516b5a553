"""MICE event attendance + OJT tracker package.

This package is organized by feature modules (students, events, attendance,
notifications, ojt, users) with a thin Flask controller layer over
service/repository layers.
"""
