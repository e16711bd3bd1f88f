"""
Enumerations shared by every layer of the CMMS insights engine.

Modules
-------
maintenance_taxonomy : asset status, work-order type/status/priority,
                       user roles, alert types and expertise scope.
"""
