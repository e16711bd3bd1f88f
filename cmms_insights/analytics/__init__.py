"""
Supervisor analytics and system alerts over store snapshots.
"""
