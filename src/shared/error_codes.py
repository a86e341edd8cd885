# src/shared/error_codes.py
# Central mapping that aligns with the API error envelope.
# Keep keys stable: the frontend keys off these.
ERROR_CODES = {
    # ─── Validation & Requests ──────────────────────────────────────────────
    "validation_error": {
        "http": 400,
        "message": "Validation failed for one or more fields."
    },
    "tenant_header_missing": {
        "http": 400,
        "message": "Tenant ID required in x-tenant-id header"
    },

    # ─── Tenant Registry ───────────────────────────────────────────────────
    "not_found": {
        "http": 404,
        "message": "Resource not found."
    },
    "tenant_not_found": {
        "http": 404,
        "message": "Tenant not found"
    },
    "conflict": {
        "http": 409,
        "message": "Conflict with existing resource."
    },
    "domain_taken": {
        "http": 409,
        "message": "A tenant with this domain already exists."
    },

    # ─── Database / Tenant Pools ───────────────────────────────────────────
    "database_error": {
        "http": 500,
        "message": "Internal server error"
    },
    "tenant_provisioning_failed": {
        "http": 500,
        "message": "Internal server error"
    },

    # ─── Internal ──────────────────────────────────────────────────────────
    "internal_error": {
        "http": 500,
        "message": "Internal server error"
    },
}
