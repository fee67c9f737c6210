"""JSON Schema for quote records crossing the persistence boundary."""

# Numeric fields accept strings and nulls; the models coerce them to safe defaults.
_NUMERIC = {"type": ["number", "string", "null"]}
_TEXT = {"type": ["string", "null"]}

QUOTE_RECORD_SCHEMA: dict = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "type": "object",
    "required": ["groups"],
    "properties": {
        "id": _TEXT,
        "project_title": _TEXT,
        "customer_id": _TEXT,
        "customer_name_snapshot": _TEXT,
        "issue_date": {"type": "string", "format": "date"},
        "status": {"enum": ["draft", "sent", "accepted", "revised", "canceled"]},
        "vat_type": {"enum": ["exclusive", "inclusive"]},
        "discount_amount": _NUMERIC,
        "agency_fee_rate": _NUMERIC,
        "version": {"type": "integer", "minimum": 1},
        "show_cost_management": {"type": "boolean"},
        "template_id": _TEXT,
        "parent_quote_id": _TEXT,
        "groups": {
            "type": "array",
            "items": {
                "type": "object",
                "required": ["name", "items"],
                "properties": {
                    "id": _TEXT,
                    "name": {"type": "string"},
                    "sort_order": {"type": "integer"},
                    "include_in_fee": {"type": "boolean"},
                    "items": {
                        "type": "array",
                        "items": {
                            "type": "object",
                            "required": ["name", "details"],
                            "properties": {
                                "id": _TEXT,
                                "name": {"type": "string"},
                                "sort_order": {"type": "integer"},
                                "include_in_fee": {"type": "boolean"},
                                "details": {
                                    "type": "array",
                                    "items": {
                                        "type": "object",
                                        "required": ["name"],
                                        "properties": {
                                            "id": _TEXT,
                                            "name": {"type": "string"},
                                            "description": _TEXT,
                                            "quantity": _NUMERIC,
                                            "days": _NUMERIC,
                                            "unit": {"type": "string"},
                                            "unit_price": _NUMERIC,
                                            "is_service": {"type": "boolean"},
                                            "cost_price": _NUMERIC,
                                            "supplier_id": _TEXT,
                                            "supplier_name_snapshot": _TEXT,
                                        },
                                    },
                                },
                            },
                        },
                    },
                },
            },
        },
    },
}
