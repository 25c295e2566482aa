"""Competency status derived from which progress fields are populated."""

STATUS_PENDING = "pending"
STATUS_VIEWED = "viewed"
STATUS_SELF_RATED = "selfRated"
STATUS_READY = "ready"
STATUS_REVIEWED = "reviewed"

# Furthest stage last
STATUS_ORDER = (STATUS_PENDING, STATUS_VIEWED, STATUS_SELF_RATED, STATUS_READY, STATUS_REVIEWED)

STATUS_DISPLAY = {
    STATUS_PENDING: "Not started",
    STATUS_VIEWED: "Viewed",
    STATUS_SELF_RATED: "Self-rated",
    STATUS_READY: "Ready for review",
    STATUS_REVIEWED: "Reviewed",
}


def derive_status(progress) -> str:
    """Return the status label for a progress row (None means no row yet)."""
    if progress is None:
        return STATUS_PENDING
    if progress.rating is not None and progress.date_validated:
        return STATUS_REVIEWED
    if progress.handoff_date:
        return STATUS_READY
    if progress.self_rating is not None:
        return STATUS_SELF_RATED
    if progress.viewed_date:
        return STATUS_VIEWED
    return STATUS_PENDING
