# capability checked by the workspace permission service before touching publications
MANAGE_CONTENT = "manage-content"

BULK_OPERATIONS = {"move", "delete"}

STATUS_COLORS = {
    "published": "#10B981",
    "failed": "#EF4444",
    "publishing": "#3B82F6",
    "pending_review": "#F59E0B",
    "approved": "#8B5CF6",
    "pending": "#6366F1",
    "draft": "#6B7280",
}

DEFAULT_EVENT_COLOR = "#0EA5E9"
