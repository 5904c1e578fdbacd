"""JSON schema definition for reporter output."""
from __future__ import annotations

SCHEMA_VERSION = "1.0.0"

JSON_SCHEMA_V1 = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "title": "unitrun report",
    "type": "object",
    "required": ["schema_version", "generated_at", "summary", "cases"],
    "properties": {
        "schema_version": {"type": "string"},
        "generated_at": {"type": "string", "format": "date-time"},
        "summary": {
            "type": "object",
            "required": ["total", "passed", "failed", "errored", "success", "duration_s"],
            "properties": {
                "total": {"type": "integer", "minimum": 0},
                "passed": {"type": "integer", "minimum": 0},
                "failed": {"type": "integer", "minimum": 0},
                "errored": {"type": "integer", "minimum": 0},
                "success": {"type": "boolean"},
                "duration_s": {"type": "number"},
            },
        },
        "cases": {
            "type": "array",
            "items": {
                "type": "object",
                "required": ["id", "name", "status", "duration_ms", "checks"],
                "properties": {
                    "id": {"type": "string"},
                    "name": {"type": "string"},
                    "source": {"type": ["string", "null"]},
                    "line": {"type": "integer"},
                    "status": {"enum": ["passed", "failed", "errored"]},
                    "duration_ms": {"type": "number"},
                    "checks": {"type": "integer", "minimum": 0},
                    "warnings": {"type": "array", "items": {"type": "string"}},
                    "assertion": {
                        "type": "object",
                        "required": ["kind", "message"],
                        "properties": {
                            "kind": {"enum": ["pass", "failure", "error"]},
                            "message": {"type": "string"},
                            "check": {"type": ["string", "null"]},
                            "location": {"type": ["string", "null"]},
                        },
                    },
                },
            },
        },
    },
}
