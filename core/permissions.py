# ============================================
# CENTRALIZED ROLE → PERMISSIONS MAP
# ============================================
# Route-level permissions only. Per-resource decisions (who may edit
# THIS maintenance request) live in core.resource_authorization.
ROLE_PERMISSIONS = {

    # =====================================================
    # SUPER ADMIN — Full access to everything
    # =====================================================
    "super_admin": ["*"],

    # =====================================================
    # PLATFORM ADMIN
    # =====================================================
    "admin": [
        "audit_logs:read",
        "buildings:read", "buildings:write",
        "apartments:read", "apartments:write",
        "payments:read",
    ],

    # =====================================================
    # PROPERTY MANAGER
    # =====================================================
    "property_manager": [
        "buildings:read",
        "apartments:read", "apartments:write",
        "payments:read",
    ],

    # =====================================================
    # RESIDENTS
    # =====================================================
    "owner": [
        "buildings:read",
        "apartments:read",
    ],

    "tenant": [
        "buildings:read",
    ],

    # =====================================================
    # FALLBACK
    # =====================================================
    "guest": [],
}

DEFAULT_ROLE = "tenant"
