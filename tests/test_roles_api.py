import uuid
import pytest
from stafftrack.models.enums import AppRole


@pytest.mark.asyncio
async def test_admin_lists_and_reads_roles(client, add_role, auth_headers):
    admin = await add_role(AppRole.Admin)
    other = await add_role(AppRole.Finance, ["Finance"])
    headers = auth_headers(admin.user_id)

    res = await client.get("/api/roles/", headers=headers)
    assert res.status_code == 200
    assert {r["user_id"] for r in res.json()} == {str(admin.user_id), str(other.user_id)}

    res = await client.get(f"/api/roles/{other.user_id}", headers=headers)
    assert res.status_code == 200
    assert res.json()["role"] == "finance"

    res = await client.get(f"/api/roles/{uuid.uuid4()}", headers=headers)
    assert res.status_code == 404


@pytest.mark.asyncio
async def test_non_admin_cannot_open_admin_view(client, add_role, auth_headers):
    # every department at once still does not unlock the admin view
    manager = await add_role(
        AppRole.AccountManager,
        ["Recruiter", "Account Manager", "Business Development", "Operations Manager", "Finance"],
        ["Recruiter", "Account Manager", "Business Development", "Operations Manager", "Finance"],
    )
    res = await client.get("/api/roles/", headers=auth_headers(manager.user_id))
    assert res.status_code == 403
    assert res.json()["detail"] == "Access denied to view 'admin'"


@pytest.mark.asyncio
async def test_admin_upserts_role(client, add_role, auth_headers):
    admin = await add_role(AppRole.Admin)
    target = uuid.uuid4()
    headers = auth_headers(admin.user_id)

    payload = {
        "role": "recruiter",
        "department_access": ["Recruiter"],
        "department_edit_access": ["Recruiter"],
    }
    res = await client.put(f"/api/roles/{target}", json=payload, headers=headers)
    assert res.status_code == 200
    assert res.json()["role"] == "recruiter"

    # the new grants take effect on the target's next lookup
    res = await client.get("/api/me/permissions", headers=auth_headers(target))
    assert res.json()["editable_tables"] == ["recruiter_activities"]


@pytest.mark.asyncio
async def test_upsert_rejects_unknown_role(client, add_role, auth_headers):
    admin = await add_role(AppRole.Admin)
    res = await client.put(
        f"/api/roles/{uuid.uuid4()}",
        json={"role": "superuser"},
        headers=auth_headers(admin.user_id),
    )
    assert res.status_code == 422


@pytest.mark.asyncio
async def test_non_admin_cannot_edit_roles(client, add_role, auth_headers):
    recruiter = await add_role(AppRole.Recruiter, ["Recruiter"], ["Recruiter"])
    res = await client.put(
        f"/api/roles/{recruiter.user_id}",
        json={"role": "admin"},
        headers=auth_headers(recruiter.user_id),
    )
    assert res.status_code == 403


@pytest.mark.asyncio
async def test_only_admin_deletes(client, add_role, auth_headers):
    admin = await add_role(AppRole.Admin)
    finance = await add_role(AppRole.Finance, ["Finance"], ["Finance"])
    victim = await add_role(AppRole.Viewer)

    res = await client.delete(f"/api/roles/{victim.user_id}", headers=auth_headers(finance.user_id))
    assert res.status_code == 403

    res = await client.delete(f"/api/roles/{victim.user_id}", headers=auth_headers(admin.user_id))
    assert res.status_code == 200
    assert res.json()["detail"] == "Role record deleted successfully"

    res = await client.delete(f"/api/roles/{victim.user_id}", headers=auth_headers(admin.user_id))
    assert res.status_code == 404
