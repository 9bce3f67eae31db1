from conftest import ADMIN, MEMBER, MEMBER_ID, OTHER_MEMBER_ID, SUPER_ADMIN_ID
from app.utils.submit_guard import submit_guard


def seed_profiles(backend):
    backend.seed(
        "about",
        {"id": "founder", "name": "Founder", "status": "Researcher", "bio": "Started it",
         "role": "owner", "is_active": True, "user_id": SUPER_ADMIN_ID, "skills": ["ML"]},
        {"id": "mine", "name": "Mina", "status": "Student", "bio": "Hi", "role": "member",
         "is_active": True, "user_id": MEMBER_ID, "skills": ["Python", "SQL"],
         "profile_image": "https://img/mina.png"},
        {"id": "theirs", "name": "Theo", "status": "Developer", "bio": "Yo", "role": "member",
         "is_active": True, "user_id": OTHER_MEMBER_ID, "skills": None},
        {"id": "retired", "name": "Old", "status": "Other", "bio": "Bye", "role": "member",
         "is_active": False, "user_id": "someone"},
    )


def profile_form(**overrides):
    form = {"name": "Mina", "status": "Student", "bio": "Updated bio", "skills": "Python, SQL"}
    form.update(overrides)
    return form


def test_about_puts_founder_first_with_badge(client, backend):
    seed_profiles(backend)

    body = client.get("/profiles/about").json()

    names = [p["name"] for p in body["profiles"]]
    assert names == ["Founder", "Theo", "Mina"]
    assert body["profiles"][0]["badge"] == "Founder"
    assert all(p["badge"] is None for p in body["profiles"][1:])
    assert body["empty"] is False


def test_about_without_profiles_shows_placeholder(client, backend):
    body = client.get("/profiles/about").json()

    assert body["empty"] is True
    assert body["profiles"][0]["name"] == "Your Name"
    assert body["profiles"][0]["bio"] == "Add your bio in the admin panel."


def test_about_backend_failure(client, backend):
    backend.fail_on.add(("about", "select"))

    res = client.get("/profiles/about")

    assert res.status_code == 503
    assert res.json()["detail"]["retry"] == "/profiles/about"


def test_member_cannot_edit_someone_elses_profile(client, backend):
    seed_profiles(backend)

    res = client.put("/profiles/admin/profile/theirs", headers=MEMBER, data=profile_form(name="Theo"))

    assert res.status_code == 403
    assert "Permission denied" in res.json()["detail"]
    assert backend.writes() == []


def test_member_cannot_delete_someone_elses_profile(client, backend):
    seed_profiles(backend)

    res = client.delete("/profiles/admin/profile/theirs", headers=MEMBER, params={"confirm": "true"})

    assert res.status_code == 403
    assert backend.writes() == []


def test_member_edits_own_profile_as_member(client, backend):
    seed_profiles(backend)

    res = client.put(
        "/profiles/admin/profile/mine",
        headers=MEMBER,
        data=profile_form(role="owner", is_active="false", user_id="hijack"),
    )

    assert res.status_code == 200
    saved = res.json()
    assert saved["role"] == "member"
    assert saved["is_active"] is True
    assert saved["user_id"] == MEMBER_ID
    assert saved["bio"] == "Updated bio"
    assert saved["profile_image"] == "https://img/mina.png"


def test_member_creates_profile_owned_by_themselves(client, backend):
    res = client.post(
        "/profiles/admin/profile",
        headers=MEMBER,
        data=profile_form(role="owner", user_id=OTHER_MEMBER_ID),
    )

    assert res.status_code == 200
    saved = res.json()
    assert saved["user_id"] == MEMBER_ID
    assert saved["role"] == "member"
    assert saved["is_active"] is True


def test_super_admin_manages_any_profile(client, backend):
    seed_profiles(backend)

    res = client.put(
        "/profiles/admin/profile/theirs",
        headers=ADMIN,
        data=profile_form(name="Theo", role="owner", is_active="false"),
    )

    assert res.status_code == 200
    saved = res.json()
    assert saved["role"] == "owner"
    assert saved["is_active"] is False
    assert saved["user_id"] == OTHER_MEMBER_ID


def test_super_admin_assigns_owner_at_creation(client, backend):
    res = client.post(
        "/profiles/admin/profile",
        headers=ADMIN,
        data=profile_form(user_id=OTHER_MEMBER_ID),
    )

    assert res.json()["user_id"] == OTHER_MEMBER_ID


def test_profile_requires_name_status_bio(client, backend):
    res = client.post("/profiles/admin/profile", headers=MEMBER, data={"name": "X"})

    assert res.status_code == 422
    assert res.json()["detail"]["missing"] == ["status", "bio"]
    assert backend.writes() == []


def test_profile_form_joins_skills(client, backend):
    seed_profiles(backend)

    body = client.get("/profiles/admin/profile/mine/form", headers=MEMBER).json()

    assert body["form"]["skills"] == "Python, SQL"
    assert body["can_edit"] is True
    assert body["mode"] == {"kind": "edit", "id": "mine"}


def test_management_list_flags_editable_profiles(client, backend):
    seed_profiles(backend)

    body = client.get("/profiles/admin/profiles", headers=MEMBER).json()

    editable = {p["id"]: p["can_edit"] for p in body}
    assert editable == {"founder": False, "mine": True, "theirs": False, "retired": False}


def test_owner_delete_needs_confirmation(client, backend):
    seed_profiles(backend)

    cancelled = client.delete("/profiles/admin/profile/mine", headers=MEMBER)
    assert cancelled.status_code == 409
    assert backend.writes() == []

    confirmed = client.delete("/profiles/admin/profile/mine", headers=MEMBER, params={"confirm": "true"})
    assert confirmed.status_code == 200
    assert "mine" not in [p["id"] for p in confirmed.json()]


def test_incomplete_form_for_someone_elses_profile_is_denied(client, backend):
    seed_profiles(backend)

    res = client.put("/profiles/admin/profile/theirs", headers=MEMBER, data={"name": "Theo"})

    assert res.status_code == 403
    assert "Permission denied" in res.json()["detail"]
    assert backend.writes() == []


def test_update_keeps_form_when_lookup_fails(client, backend):
    seed_profiles(backend)
    backend.fail_on.add(("about", "select"))

    res = client.put("/profiles/admin/profile/mine", headers=MEMBER, data=profile_form())

    assert res.status_code == 502
    assert res.json()["detail"]["form"]["bio"] == "Updated bio"
    assert backend.writes() == []


def test_profile_form_load_failure_offers_retry(client, backend):
    seed_profiles(backend)
    backend.fail_on.add(("about", "select"))

    res = client.get("/profiles/admin/profile/mine/form", headers=MEMBER)

    assert res.status_code == 503
    assert res.json()["detail"]["retry"] == "/profiles/admin/profile/mine/form"


def test_delete_lookup_failure_deletes_nothing(client, backend):
    seed_profiles(backend)
    backend.fail_on.add(("about", "select"))

    res = client.delete("/profiles/admin/profile/mine", headers=MEMBER, params={"confirm": "true"})

    assert res.status_code == 503
    assert backend.writes() == []


def test_delete_reports_success_when_refresh_fails(client, backend):
    seed_profiles(backend)
    backend.fail_reads_after_write.add("about")

    res = client.delete("/profiles/admin/profile/mine", headers=MEMBER, params={"confirm": "true"})

    assert res.status_code == 503
    assert res.json()["detail"]["message"].startswith("Profile deleted")
    assert "mine" not in [p["id"] for p in backend.tables["about"]]


def test_failed_profile_write_keeps_form(client, backend):
    seed_profiles(backend)
    backend.fail_on.add(("about", "update"))

    res = client.put("/profiles/admin/profile/mine", headers=MEMBER, data=profile_form())

    assert res.status_code == 502
    assert res.json()["detail"]["form"]["skills"] == "Python, SQL"


def test_duplicate_profile_submission_is_refused(client, backend):
    seed_profiles(backend)

    with submit_guard.hold((MEMBER_ID, "profile", "edit")):
        res = client.put("/profiles/admin/profile/mine", headers=MEMBER, data=profile_form())

    assert res.status_code == 409
    assert backend.writes() == []


def test_new_profile_image_replaces_the_old_one(client, backend):
    seed_profiles(backend)

    res = client.put(
        "/profiles/admin/profile/mine",
        headers=MEMBER,
        data=profile_form(profile_image="https://img/mina.png"),
        files={"image": ("me.jpg", b"jpeg", "image/jpeg")},
    )

    assert res.status_code == 200
    bucket, path, contents = backend.uploads[0]
    assert path.endswith(".jpg")
    assert res.json()["profile_image"] == f"https://storage.example.com/{bucket}/{path}"
    assert backend.upload_auth == ["Bearer member-token"]
