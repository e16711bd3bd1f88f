"""
Reference records for the demo hospital.

These are the fixed rows every demo dataset starts from: the hospital's
locations and staff, a core set of named devices, the named spare parts and
a handful of historical work orders. ``DemoDataGenerator`` validates them
into models and adds generated records on top.

Rows are plain dicts so they can be dumped to JSON or sent to the remote
database unchanged.
"""

from __future__ import annotations

LOCATIONS: list[dict] = [
    {"location_id": 101, "name": "Radio-1",      "department": "Radiology",        "city": "Tabuk", "building": "Main",        "room": "R-101"},
    {"location_id": 102, "name": "ICU-4",        "department": "Intensive Care",   "city": "Tabuk", "building": "Main",        "room": "ICU-4"},
    {"location_id": 103, "name": "ER-2",         "department": "Emergency",        "city": "Tabuk", "building": "Main",        "room": "ER-Tri"},
    {"location_id": 104, "name": "ICU-1",        "department": "Intensive Care",   "city": "Tabuk", "building": "Main",        "room": "ICU-1"},
    {"location_id": 105, "name": "Ward-302",     "department": "General Ward",     "city": "Tabuk", "building": "West Wing",   "room": "302"},
    {"location_id": 106, "name": "OT-A",         "department": "Surgery",          "city": "Tabuk", "building": "Main",        "room": "OT-A"},
    {"location_id": 107, "name": "OT-B",         "department": "Surgery",          "city": "Tabuk", "building": "Main",        "room": "OT-B"},
    {"location_id": 108, "name": "Lab-Biochem",  "department": "Laboratory",       "city": "Tabuk", "building": "East Wing",   "room": "L-01"},
    {"location_id": 109, "name": "Cardio-Echo",  "department": "Cardiology",       "city": "Tabuk", "building": "Main",        "room": "C-10"},
    {"location_id": 110, "name": "Neuro-EEG",    "department": "Neurology",        "city": "Tabuk", "building": "Main",        "room": "N-05"},
    {"location_id": 111, "name": "NICU-Main",    "department": "Neonatal ICU",     "city": "Tabuk", "building": "Main",        "room": "NICU"},
    {"location_id": 112, "name": "Mat-Delivery", "department": "Maternity",        "city": "Tabuk", "building": "West Wing",   "room": "D-01"},
    {"location_id": 113, "name": "Dia-Unit",     "department": "Dialysis",         "city": "Tabuk", "building": "Annex",       "room": "D-Hall"},
    {"location_id": 114, "name": "CSSD-Clean",   "department": "Sterilization",    "city": "Tabuk", "building": "Basement",    "room": "B-05"},
    {"location_id": 115, "name": "Pharm-Disp",   "department": "Pharmacy",         "city": "Tabuk", "building": "Main",        "room": "Lobby"},
    {"location_id": 116, "name": "Ped-Ward",     "department": "Pediatrics",       "city": "Tabuk", "building": "West Wing",   "room": "401"},
    {"location_id": 117, "name": "Onco-Chemo",   "department": "Oncology",         "city": "Tabuk", "building": "East Wing",   "room": "ONC-1"},
    {"location_id": 118, "name": "PT-Gym",       "department": "Physical Therapy", "city": "Tabuk", "building": "Annex",       "room": "Gym"},
    {"location_id": 119, "name": "Maint-Shop",   "department": "Maintenance",      "city": "Tabuk", "building": "Engineering", "room": "M-Shop"},
    {"location_id": 120, "name": "Server-Room",  "department": "IT",               "city": "Tabuk", "building": "Admin",       "room": "IT-01"},
    {"location_id": 121, "name": "OPD",          "department": "OPD",              "city": "Amlaj", "building": "Main Building", "room": "OPD"},
]

USERS: list[dict] = [
    {"user_id": 1, "name": "Dr. Sarah Smith", "role": "Supervisor", "email": "sarah@hospital.com",
     "location_id": 101, "phone_number": "0501234567", "department": "Radiology"},
    {"user_id": 2, "name": "Abdalla Yasir", "role": "Technician", "email": "abdalla@fgc.com",
     "location_id": 119, "phone_number": "0509876543", "department": "Maintenance"},
    {"user_id": 3, "name": "Nurse Jackie", "role": "Nurse", "email": "jackie@hospital.com",
     "location_id": 105, "phone_number": "0555555555", "department": "General Ward"},
    {"user_id": 4, "name": "Eng. Mike Ross", "role": "Engineer", "email": "mike@hospital.com",
     "location_id": 102, "phone_number": "0566666666", "department": "Biomedical"},
    {"user_id": 5, "name": "Admin Head", "role": "Admin", "email": "admin@hospital.com",
     "phone_number": "0599999999", "department": "Administration"},
    {"user_id": 6, "name": "Vendor Steve", "role": "Vendor", "email": "steve@vendor.com",
     "phone_number": "0588888888", "department": "External"},
]

# Columns: asset_id, name, model, location_id, status, purchase_date,
#          operating_hours, last_calibration_date, next_calibration_date
_ASSET_ROWS: list[tuple] = [
    ("NFC-1001", "MRI Scanner",          "Siemens Magnetom",         101, "Running",      "2019-05-15", 12000, "2022-10-26", "2023-10-26"),
    ("NFC-1002", "Infusion Pump",        "Baxter Sigma",             102, "Down",         "2021-08-10",   450, "2023-01-15", "2024-01-15"),
    ("NFC-1003", "X-Ray Machine",        "Philips Digital",          103, "Running",      "2018-03-22",  3400, "2023-03-20", "2024-03-20"),
    ("NFC-1004", "Ventilator",           "Hamilton G5",              104, "Under Maint.", "2020-01-10",  2100, "2023-06-01", "2023-12-01"),
    ("NFC-1005", "Anesthesia Machine",   "Drager Fabius",            106, "Running",      "2020-05-12",  1500, "2023-05-01", "2024-05-01"),
    ("NFC-1008", "C-Arm",                "GE OEC 9900",              107, "Under Maint.", "2018-06-30",  3100, "2023-06-01", "2023-12-01"),
    ("NFC-1010", "Patient Monitor",      "Philips IntelliVue MX800", 102, "Running",      "2022-01-10",  8500, "2023-02-01", "2024-02-01"),
    ("NFC-1011", "Defibrillator",        "Zoll R Series",            102, "Running",      "2020-03-20",   120, "2023-09-10", "2024-09-10"),
    ("NFC-1013", "Ventilator",           "Hamilton C1",              104, "Down",         "2019-04-15", 15000, "2023-04-15", "2023-10-15"),
    ("NFC-1015", "Hematology Analyzer",  "Sysmex XN-1000",           108, "Running",      "2018-11-11",  9000, "2023-11-01", "2024-05-01"),
    ("NFC-1016", "Chemistry Analyzer",   "Roche Cobas 6000",         108, "Under Maint.", "2017-08-22", 14000, "2023-08-20", "2024-02-20"),
    ("NFC-1021", "Stress Test System",   "Quinton Q-Stress",         109, "Down",         "2016-05-05",  4000, "2023-05-05", "2023-11-05"),
    ("NFC-1027", "Hemodialysis Machine", "Fresenius 5008S",          113, "Running",      "2021-01-05",  7000, "2023-07-05", "2024-01-05"),
    ("NFC-1028", "Hemodialysis Machine", "Fresenius 5008S",          113, "Under Maint.", "2021-01-05",  6950, "2023-01-05", "2023-07-05"),
    ("NFC-1031", "Plasma Sterilizer",    "Sterrad 100NX",            114, "Down",         "2019-11-11",  3000, "2023-05-11", "2023-11-11"),
    ("NFC-1039", "Infusion Pump",        "Baxter Sigma",             105, "Running",      "2021-08-10",   200, "2023-08-10", "2024-08-10"),
    ("NFC-1040", "Wheelchair",           "Invacare Tracer",          105, "Scrapped",     "2015-01-01",     0, "2020-01-01", "2021-01-01"),
    ("NFC-1042", "Infusion Pump",        "Braun Space",              116, "Running",      "2020-09-09",  4000, "2023-09-09", "2024-09-09"),
]

ASSETS: list[dict] = [
    {
        "asset_id": row[0],
        "nfc_tag_id": row[0],
        "name": row[1],
        "model": row[2],
        "location_id": row[3],
        "status": row[4],
        "purchase_date": row[5],
        "operating_hours": row[6],
        "last_calibration_date": row[7],
        "next_calibration_date": row[8],
    }
    for row in _ASSET_ROWS
] + [
    {
        "asset_id": "17678", "nfc_tag_id": "17678", "name": "Vital Signs Monitors",
        "model": "V100", "manufacturer": "GE", "serial_number": "SH614030057SA",
        "location_id": 121, "status": "Running", "purchase_date": "2020-01-01",
        "warranty_expiration": "2022-01-01", "operating_hours": 1500,
        "last_calibration_date": "2023-01-01", "next_calibration_date": "2024-01-01",
    },
]

INVENTORY: list[dict] = [
    {"part_id": 1, "part_name": "MRI Coil Connector",    "current_stock": 2,  "min_reorder_level": 3,  "cost": 500},
    {"part_id": 2, "part_name": "Infusion Battery Pack", "current_stock": 15, "min_reorder_level": 10, "cost": 45},
    {"part_id": 3, "part_name": "X-Ray Tube Fuse",       "current_stock": 5,  "min_reorder_level": 5,  "cost": 12},
    {"part_id": 4, "part_name": "Ventilator Filter",     "current_stock": 0,  "min_reorder_level": 20, "cost": 8},
]

# Word lists for generated spare parts: "<modifier> <type> <unit>".
PART_TYPES = [
    "Sensor", "Cable", "Battery", "Filter", "PCB", "Valve", "Motor", "Display",
    "Probe", "Seal", "Gasket", "Tubing", "Power Supply", "Switch", "Relay", "Fan",
]
PART_MODIFIERS = [
    "Main", "Auxiliary", "High Voltage", "Low Noise", "Digital", "Analog",
    "Optical", "Thermal", "Hydraulic", "Pneumatic", "Backup", "Control",
]
PART_UNITS = ["Assembly", "Module", "Kit", "Unit", "Board", "Pack"]

INCIDENTS: list[dict] = [
    {"incident_id": 1001, "timestamp": "2023-10-25T08:30:00", "asset_id": "NFC-1002",
     "reported_by_user_id": 3, "report_type": "Corrective",
     "description": "Pump not holding charge", "status": "Converted"},
]

WORK_ORDERS: list[dict] = [
    {"wo_id": 5001, "incident_id": 1001, "asset_id": "NFC-1002", "type": "Corrective",
     "priority": "Critical", "assigned_to_id": 2, "description": "Pump not holding charge",
     "status": "Open", "created_at": "2023-10-25"},
    {"wo_id": 5002, "asset_id": "NFC-1001", "type": "Preventive", "priority": "Medium",
     "assigned_to_id": 2, "description": "Annual calibration", "status": "In Progress",
     "start_time": "2023-10-26T09:00:00", "created_at": "2023-10-26"},
    {"wo_id": 5003, "asset_id": "NFC-1004", "type": "Corrective", "priority": "High",
     "assigned_to_id": 2, "description": "Ventilator screen flickering", "status": "Closed",
     "start_time": "2023-10-20T10:00:00", "close_time": "2023-10-20T14:00:00",
     "created_at": "2023-10-20", "parts_used": [{"part_id": 4, "quantity": 2}]},
    {"wo_id": 5004, "asset_id": "NFC-1011", "type": "Preventive", "priority": "Low",
     "assigned_to_id": 2, "description": "Routine Inspection", "status": "Closed",
     "start_time": "2023-10-22T08:00:00", "close_time": "2023-10-22T09:30:00",
     "created_at": "2023-10-21"},
    {"wo_id": 5005, "asset_id": "NFC-1015", "type": "Calibration", "priority": "High",
     "assigned_to_id": 4, "description": "Calibration due", "status": "Open",
     "created_at": "2023-10-27"},
    # No start_time: repair duration unknown.
    {"wo_id": 2236, "asset_id": "17678", "type": "Corrective", "priority": "High",
     "assigned_to_id": 2, "description": "Not Working", "status": "Closed",
     "created_at": "2025-11-09", "close_time": "2025-11-12"},
    {"wo_id": 5099, "asset_id": "NFC-1005", "type": "Corrective", "priority": "Medium",
     "assigned_to_id": 6, "description": "Anesthesia Gas Mixer Repair", "status": "Open",
     "created_at": "2023-11-01"},
]

MOVEMENT_LOGS: list[dict] = [
    {"log_id": 1, "asset_id": "NFC-1002", "from_location_id": 101, "to_location_id": 102,
     "timestamp": "2023-10-24T08:30:00", "user_id": 2},
    {"log_id": 2, "asset_id": "NFC-1004", "from_location_id": 102, "to_location_id": 104,
     "timestamp": "2023-10-20T14:15:00", "user_id": 3},
]

# Extra field staff added by the generator so ranking has real choices.
GENERATED_TECHNICIAN_NAMES = [
    "Omar Haddad", "Lina Farouk", "Ravi Menon", "Grace Okafor", "Tomas Lind",
]

FAULT_DESCRIPTIONS = [
    "Device does not power on",
    "Intermittent alarm",
    "Display flickering",
    "Battery not holding charge",
    "Sensor reading out of range",
    "Error code on startup",
    "Noisy motor",
    "Leak detected",
]
