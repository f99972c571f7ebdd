from tests.conftest import seed_subject, seed_user


def test_feedback_search_type_and_status_filters(client):
    asha = seed_user("asha", first_name="Asha", email="asha@school.in")
    ravi = seed_user("ravi", email="ravi@school.in")
    client.post("/api/feedback", json={"user_id": asha, "type": "quiz_error", "feedback_text": "Question 3 has two answers"})
    client.post("/api/feedback", json={"user_id": ravi, "type": "feature_suggestion", "feedback_text": "Dark mode please"})

    listing = client.get("/api/admin/feedback").json()
    assert listing["stats"]["total"] == 2
    assert listing["stats"]["by_type"]["quiz_error"] == 1
    assert listing["stats"]["by_type"]["technical_bug"] == 0
    assert listing["stats"]["resolved"] == 0

    by_name = client.get("/api/admin/feedback", params={"q": "ASHA"}).json()["feedbacks"]
    assert [f["user_name"] for f in by_name] == ["Asha"]

    by_text = client.get("/api/admin/feedback", params={"q": "dark mode"}).json()["feedbacks"]
    assert [f["user_email"] for f in by_text] == ["ravi@school.in"]

    by_type = client.get("/api/admin/feedback", params={"type": "quiz_error"}).json()["feedbacks"]
    assert len(by_type) == 1

    unknown_type = client.get("/api/admin/feedback", params={"type": "nonsense"}).json()["feedbacks"]
    assert len(unknown_type) == 2


def test_feedback_response_updates_status(client):
    user_id = seed_user()
    feedback = client.post("/api/feedback", json={"user_id": user_id, "type": "technical_bug"}).json()

    response = client.post(
        f"/api/feedback/{feedback['id']}/respond",
        json={"admin_response": "Fixed in the latest release", "status": "resolved"},
    )

    assert response.status_code == 200
    assert response.json()["status"] == "resolved"
    assert response.json()["reviewed_at"] is not None
    resolved = client.get("/api/admin/feedback", params={"status": "resolved"}).json()
    assert resolved["stats"]["resolved"] == 1
    assert len(resolved["feedbacks"]) == 1
    assert client.post("/api/feedback/9999/respond", json={"admin_response": "x"}).status_code == 404


def test_free_tier_doubt_limit_per_day(client):
    user_id = seed_user(tier="free")
    for n in range(2):
        assert client.post("/api/doubts", json={"user_id": user_id, "question": f"Why {n}?"}).status_code == 201

    response = client.post("/api/doubts", json={"user_id": user_id, "question": "One more?"})

    assert response.status_code == 403
    assert response.json()["detail"]["limit"] == 2


def test_premium_doubts_are_unlimited(client):
    user_id = seed_user(tier="premium")
    for n in range(4):
        assert client.post("/api/doubts", json={"user_id": user_id, "question": f"Q{n}"}).status_code == 201


def test_answer_doubt_once(client):
    user_id = seed_user()
    subject_id, _ = seed_subject("Chemistry", "Atoms")
    doubt = client.post(
        "/api/doubts", json={"user_id": user_id, "question": "What is a mole?", "subject_id": subject_id}
    ).json()
    assert doubt["status"] == "pending"

    answered = client.post(f"/api/admin/doubts/{doubt['id']}/answer", json={"answer": "6.022e23 particles"})
    assert answered.status_code == 200
    assert answered.json()["status"] == "answered"
    assert answered.json()["answer"] == "6.022e23 particles"

    again = client.post(f"/api/admin/doubts/{doubt['id']}/answer", json={"answer": "changed"})
    assert again.status_code == 409

    by_subject = client.get("/api/doubts", params={"user_id": user_id, "q": "chemistry"}).json()
    assert [d["id"] for d in by_subject] == [doubt["id"]]
    assert client.get("/api/doubts", params={"status": "pending"}).json() == []


def test_doubt_for_unknown_subject_is_not_found(client):
    user_id = seed_user()

    response = client.post("/api/doubts", json={"user_id": user_id, "question": "Why?", "subject_id": 9999})

    assert response.status_code == 404
    assert response.json()["detail"] == "Subject not found"
    assert client.get("/api/doubts", params={"user_id": user_id}).json() == []
