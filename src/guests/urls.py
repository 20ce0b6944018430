API_PREFIX = "/api/v1"

GROUPS_URL = f"{API_PREFIX}/groups"
GROUP_URL = f"{API_PREFIX}/groups/{{invitation_code}}"
GROUP_MEMBERS_URL = f"{API_PREFIX}/groups/{{invitation_code}}/members"

INDIVIDUALS_URL = f"{API_PREFIX}/individuals"
INDIVIDUAL_URL = f"{API_PREFIX}/individuals/{{individual_id}}"

SUBMIT_RSVP_URL = f"{API_PREFIX}/rsvp/{{invitation_code}}"

DASHBOARD_URL = f"{API_PREFIX}/dashboard"
DASHBOARD_EXPORT_URL = f"{API_PREFIX}/dashboard/export.csv"
