"""Application package for the Grampanchayat website backend.

This package exposes the models, repositories, services and routers
used by the FastAPI application in `grampanchayat.main`. Individual
modules contain the concrete implementations and documentation.
"""
