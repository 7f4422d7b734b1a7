# Rev 0.1.0
"""Sample records used to populate empty collections on first start."""
from __future__ import annotations
from typing import Any, Dict, List

SEED_ACTIVITY = "Application initialized with sample data"

SAMPLE_RECORDS: Dict[str, List[Dict[str, Any]]] = {
    "projects": [
        {
            "id": "project_1",
            "name": "Downtown Office Complex",
            "location": "123 Main Street",
            "budget": 2500000,
            "dueDate": "2024-12-31",
            "status": "active",
            "progress": 35,
            "notes": "Major commercial development project.",
        },
        {
            "id": "project_2",
            "name": "Residential Tower",
            "location": "456 Oak Avenue",
            "budget": 1800000,
            "dueDate": "2024-10-15",
            "status": "planning",
            "progress": 15,
            "notes": "High-rise residential building.",
        },
    ],
    "architects": [
        {
            "id": "architect_1",
            "name": "Sarah Johnson",
            "email": "sarah@example.com",
            "phone": "(555) 123-4567",
            "specialization": "Commercial Architecture",
            "license": "CA-ARCH-001",
            "experience": 12,
            "status": "active",
            "notes": "Expert in sustainable design.",
        },
    ],
    "supervisors": [
        {
            "id": "supervisor_1",
            "name": "Mike Thompson",
            "email": "mike@example.com",
            "phone": "(555) 234-5678",
            "department": "Construction Management",
            "certifications": "OSHA 30, PMP",
            "status": "active",
            "notes": "Excellent safety record.",
        },
    ],
    "contractors": [
        {
            "id": "contractor_1",
            "name": "David Martinez",
            "company": "Elite Construction LLC",
            "email": "david@example.com",
            "phone": "(555) 345-6789",
            "trade": "General Contractor",
            "hourlyRate": 75,
            "status": "active",
            "notes": "20 years experience.",
        },
    ],
}
