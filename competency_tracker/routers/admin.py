"""Admin API: user directory, admins, progress overview, CSV exports and reports."""
from fastapi import APIRouter
from fastapi.responses import Response

from competency_tracker.routers.deps import AdminUser, DbSession
from competency_tracker.schemas.admin import AdminAddSchema, UserCreateSchema, UserUpdateSchema
from competency_tracker.services import directory, reports

router = APIRouter(prefix="/api/admin", tags=["admin"])


def csv_attachment(text: str, filename: str) -> Response:
    return Response(
        content=text,
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


# ---------- users ----------

@router.get("/users")
async def list_users(admin: AdminUser, db: DbSession):
    return await directory.list_users(db)


@router.post("/users")
async def create_user(body: UserCreateSchema, admin: AdminUser, db: DbSession):
    """Create a user; the temporary password is only shown in this response."""
    _, temp_password = await directory.create_user(db, body)
    return {"success": True, "message": "User created successfully", "tempPassword": temp_password}


@router.put("/users/{email}")
async def update_user(email: str, body: UserUpdateSchema, admin: AdminUser, db: DbSession):
    await directory.update_user(db, email, body)
    return {"success": True, "message": "User updated successfully"}


@router.delete("/users/{email}")
async def delete_user(email: str, admin: AdminUser, db: DbSession):
    await directory.delete_user(db, email)
    return {"success": True, "message": "User deleted successfully"}


@router.post("/users/{email}/reset-password")
async def reset_password(email: str, admin: AdminUser, db: DbSession):
    new_password = await directory.reset_password(db, email)
    return {"success": True, "newPassword": new_password}


@router.get("/progress-overview")
async def progress_overview(admin: AdminUser, db: DbSession):
    return await directory.progress_overview(db)


# ---------- admins ----------

@router.get("/admins")
async def list_admins(admin: AdminUser, db: DbSession):
    return await directory.list_admins(db)


@router.post("/admins")
async def add_admin(body: AdminAddSchema, admin: AdminUser, db: DbSession):
    await directory.add_admin(db, body.email)
    return {"success": True, "message": "Admin added successfully"}


@router.delete("/admins/{email}")
async def remove_admin(email: str, admin: AdminUser, db: DbSession):
    await directory.remove_admin(db, email)
    return {"success": True, "message": "Admin removed successfully"}


# ---------- exports ----------

@router.get("/export/users")
async def export_users(admin: AdminUser, db: DbSession):
    return csv_attachment(await reports.export_users(db), "users-export.csv")


@router.get("/export/progress")
async def export_progress(admin: AdminUser, db: DbSession):
    return csv_attachment(await reports.export_progress(db), "progress-export.csv")


@router.get("/export/by-company")
async def export_by_company(admin: AdminUser, db: DbSession):
    return csv_attachment(await reports.export_by_company(db), "company-breakdown-report.csv")


@router.get("/custom-report")
async def custom_report(
    admin: AdminUser,
    db: DbSession,
    type: str | None = None,
    value: str | None = None,
    format: str | None = None,
):
    filename, text = await reports.build_custom_report(db, type, value, format)
    return csv_attachment(text, filename)
