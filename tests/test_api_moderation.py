"""Deletion request, activity log and cleanup routes."""

from course_portal.models.audit_log import AuditLogModel
from course_portal.utils.course_manager import CourseManager
from course_portal.utils.notice_manager import NoticeManager
from course_portal.schemas.notice import Notice


def _seed_course(db, file_store):
    return CourseManager(db, file_store=file_store).save_course(
        "cse-4101", "Compilers", uploads=[("notes.pdf", b"%PDF")]
    )


def test_editor_request_then_admin_approval(
    client, db, file_store, admin, editor, headers_for
):
    _seed_course(db, file_store)

    filed = client.delete("/api/courses/cse-4101", headers=headers_for(editor))
    assert filed.status_code == 202
    request_id = filed.json()["request"]["id"]

    pending = client.get("/api/deletion-requests", headers=headers_for(admin))
    assert [r["id"] for r in pending.json()["requests"]] == [request_id]

    approved = client.post(
        f"/api/deletion-requests/{request_id}/approve", headers=headers_for(admin)
    )
    assert approved.status_code == 200
    assert approved.json()["success"] is True

    assert client.get("/api/courses/cse-4101").status_code == 404
    assert not file_store.exists("materials/cse-4101/notes.pdf")
    assert client.get("/api/deletion-requests", headers=headers_for(admin)).json() == {
        "requests": []
    }

    logs = client.get("/api/admin/logs", headers=headers_for(admin)).json()["logs"]
    assert logs[0]["action"] == "APPROVE_DELETION"
    assert logs[0]["username"] == admin.username
    assert not any(log["action"] == "DELETE_COURSE" for log in logs)


def test_non_admins_cannot_list_or_decide(client, course_editor, headers_for, db):
    filed = client.post(
        "/api/deletion-requests",
        json={"type": "course", "resource_id": "cse-4101"},
        headers=headers_for(course_editor),
    )
    assert filed.status_code == 201
    assert filed.json()["requested_by"] == course_editor.username
    request_id = filed.json()["id"]

    headers = headers_for(course_editor)
    assert client.get("/api/deletion-requests", headers=headers).status_code == 403
    assert (
        client.post(
            f"/api/deletion-requests/{request_id}/approve", headers=headers
        ).status_code
        == 403
    )
    assert (
        client.post(
            f"/api/deletion-requests/{request_id}/reject", headers=headers
        ).status_code
        == 403
    )


def test_unknown_type_approval_is_400_and_stays_pending(
    client, admin, editor, headers_for
):
    filed = client.post(
        "/api/deletion-requests",
        json={"type": "widget", "resource_id": "w-1"},
        headers=headers_for(editor),
    )
    request_id = filed.json()["id"]

    response = client.post(
        f"/api/deletion-requests/{request_id}/approve", headers=headers_for(admin)
    )

    assert response.status_code == 400
    pending = client.get("/api/deletion-requests", headers=headers_for(admin)).json()
    assert [r["status"] for r in pending["requests"]] == ["pending"]

    rejected = client.post(
        f"/api/deletion-requests/{request_id}/reject", headers=headers_for(admin)
    )
    assert rejected.status_code == 200
    missing = client.post(
        f"/api/deletion-requests/{request_id}/reject", headers=headers_for(admin)
    )
    assert missing.status_code == 404


def test_log_batch_delete_and_clear(client, db, admin, editor, headers_for):
    for log_id in ("log-1", "log-2", "log-3"):
        db.add(
            AuditLogModel(
                id=log_id,
                date="2024-01-01T00:00:00+00:00",
                action="SEED",
                username="root",
                details="",
            )
        )
    db.commit()

    assert client.get("/api/admin/logs", headers=headers_for(editor)).status_code == 403

    bad = client.post(
        "/api/admin/logs/batch-delete",
        json={"ids": "log-1"},
        headers=headers_for(admin),
    )
    assert bad.status_code == 400

    batch = client.post(
        "/api/admin/logs/batch-delete",
        json={"ids": ["log-1", "log-2", "missing-id"]},
        headers=headers_for(admin),
    )
    assert batch.status_code == 200
    assert batch.json()["deleted_count"] == 2

    ids = [
        log["id"]
        for log in client.get("/api/admin/logs", headers=headers_for(admin)).json()["logs"]
    ]
    assert "log-3" in ids and "log-1" not in ids and "log-2" not in ids

    assert client.delete("/api/admin/logs/nope", headers=headers_for(admin)).status_code == 404

    cleared = client.delete("/api/admin/logs", headers=headers_for(admin))
    assert cleared.status_code == 200
    logs = client.get("/api/admin/logs", headers=headers_for(admin)).json()["logs"]
    assert [log["action"] for log in logs] == ["CLEAR_LOGS"]


def test_cleanup_removes_only_orphans(client, db, file_store, admin, headers_for):
    _seed_course(db, file_store)
    notices = NoticeManager(db, file_store=file_store)
    kept_doc = notices.store_document("routine.pdf", b"%PDF")
    notices.save_notice(Notice(title="Routine", date="2024-01-01", pdf_path=kept_doc))

    file_store.save("materials/cse-4101", "stray.pdf", b"x")
    file_store.save("materials/old-course", "leftover.pdf", b"x")
    file_store.save("notices", "notice-1.pdf", b"x")

    response = client.post("/api/admin/cleanup", headers=headers_for(admin))

    assert response.status_code == 200
    body = response.json()
    assert body["deleted_count"] == 3
    assert sorted(body["deleted_files"]) == [
        "materials/cse-4101/stray.pdf",
        "materials/old-course/leftover.pdf",
        "notices/notice-1.pdf",
    ]
    assert file_store.exists("materials/cse-4101/notes.pdf")
    assert file_store.exists(kept_doc)
    assert not (file_store.root / "materials" / "old-course").exists()
