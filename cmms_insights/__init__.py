"""
Hospital CMMS Insights — decision-support engine for a hospital maintenance
management system.

Computes equipment risk scores, ranks technicians for a job and summarises
past repairs on a device model, over a local SQLite store that can mirror a
shared PostgREST database.
"""

__version__ = "0.1.0"
