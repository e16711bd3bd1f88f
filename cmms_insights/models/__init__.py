"""
Pydantic models for every CMMS entity.

Modules
-------
asset      : Location, Asset
work_order : WorkOrder, PartUsage, approvals, Incident, CompletionReport
inventory  : InventoryPart, MovementLog
user       : User
alert      : SystemAlert
meta       : RunMetadata (pipeline audit trail)
"""
