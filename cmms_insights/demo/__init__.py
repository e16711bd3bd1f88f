"""
Demo hospital data: reference records, a seeded generator, simulation helpers.
"""
