"""
Local SQLite persistence: connection handling, schema DDL, repositories.
"""
