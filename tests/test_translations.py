from app.exceptions import ServiceUnavailableError
from app.models.database import AuditLog, Translation

from conftest import register

ARABIC_SENTENCE = "يلتزم الطرف الأول بسداد قيمة العقد كاملة خلال ثلاثين يوماً"


def translate_payload(**overrides):
    payload = {
        "sourceText": ARABIC_SENTENCE,
        "sourceLanguage": "ar",
        "targetLanguage": "en",
        "documentType": "contract",
        "purpose": "court",
        "tone": "formal",
        "jurisdiction": "qatar",
    }
    payload.update(overrides)
    return payload


def test_translate_without_api_key_reports_service_not_configured(client, make_client, db):
    assert register(client).status_code == 201
    session = make_client()
    login = session.post("/api/auth/login", json={"email": "lawyer@example.com", "password": "secret123"})
    assert login.status_code == 200

    response = session.post("/api/translate", json=translate_payload())

    assert response.status_code == 503
    assert response.json()["error"] == "AI service is not configured. Please contact your administrator."
    assert db.query(Translation).count() == 0


def test_translate_stores_model_output_verbatim(user_client, stub_claude, db):
    stub_claude.reply = "  The First Party shall pay the full contract value within thirty days.\n"

    response = user_client.post("/api/translate", json=translate_payload())

    assert response.status_code == 200
    body = response.json()
    assert body["translatedText"] == stub_claude.reply
    assert body["sourceText"] == ARABIC_SENTENCE
    assert body["sourceLanguage"] == "ar"
    assert body["targetLanguage"] == "en"
    assert body["versions"] == []
    stored = db.query(Translation).one()
    assert stored.translated_text == stub_claude.reply


def test_translate_builds_prompt_from_request(user_client, stub_claude):
    user_client.post("/api/translate", json=translate_payload(deterministic=True))

    call = stub_claude.calls[0]
    assert "highly formal and ceremonial" in call["system_prompt"]
    assert "Qatari legal system" in call["system_prompt"]
    assert call["user_prompt"] == ARABIC_SENTENCE
    assert call["deterministic"] is True
    assert call["max_output_tokens"] == 4096


def test_translate_is_not_deterministic_by_default(user_client, stub_claude):
    user_client.post("/api/translate", json=translate_payload())

    assert stub_claude.calls[0]["deterministic"] is False


def test_translate_rejects_same_language(user_client, stub_claude):
    response = user_client.post("/api/translate", json=translate_payload(targetLanguage="ar"))

    assert response.status_code == 400
    assert response.json()["error"] == "Invalid request data"
    assert stub_claude.calls == []


def test_translate_rejects_blank_text_and_unknown_tone(user_client, stub_claude):
    blank = user_client.post("/api/translate", json=translate_payload(sourceText="   "))
    bad_tone = user_client.post("/api/translate", json=translate_payload(tone="poetic"))

    assert blank.status_code == 400
    assert bad_tone.status_code == 400
    assert {d["field"] for d in bad_tone.json()["details"]} == {"tone"}
    assert stub_claude.calls == []


def test_provider_failure_returns_retry_message(user_client, stub_claude, db):
    stub_claude.error = ServiceUnavailableError("upstream said: quota exceeded for org-123")

    response = user_client.post("/api/translate", json=translate_payload())

    assert response.status_code == 503
    assert response.json()["error"] == "AI translation service is temporarily unavailable. Please try again later."
    assert "quota" not in response.text
    assert db.query(Translation).count() == 0


def test_unconfigured_gateway_is_never_called(user_client, stub_claude):
    stub_claude.configured = False

    response = user_client.post("/api/translate", json=translate_payload())

    assert response.status_code == 503
    assert stub_claude.calls == []


def test_translate_requires_authentication(client, stub_claude):
    response = client.post("/api/translate", json=translate_payload())

    assert response.status_code == 401
    assert response.json()["error"] == "Unauthorized"
    assert stub_claude.calls == []


def test_translate_is_audited(user_client, stub_claude, db):
    translation_id = user_client.post("/api/translate", json=translate_payload()).json()["id"]

    entry = db.query(AuditLog).filter(AuditLog.action == "translate").one()
    assert entry.details["translationId"] == translation_id
    assert entry.details["targetLanguage"] == "en"


def test_list_and_get_translations(user_client, stub_claude):
    first = user_client.post("/api/translate", json=translate_payload()).json()
    second = user_client.post("/api/translate", json=translate_payload(tone="concise")).json()

    listed = user_client.get("/api/translations")
    fetched = user_client.get(f"/api/translations/{first['id']}")

    assert listed.status_code == 200
    assert {t["id"] for t in listed.json()} == {first["id"], second["id"]}
    assert fetched.status_code == 200
    assert fetched.json()["tone"] == "formal"


def test_other_users_translations_are_hidden(user_client, make_client, stub_claude, db):
    translation_id = user_client.post("/api/translate", json=translate_payload()).json()["id"]
    other = make_client()
    register(other, email="other@example.com")

    assert other.get("/api/translations").json() == []
    assert other.get(f"/api/translations/{translation_id}").status_code == 404
    assert other.delete(f"/api/translations/{translation_id}").status_code == 204
    assert other.post(
        f"/api/translations/{translation_id}/versions", json={"translatedText": "hijacked"}
    ).status_code == 404

    assert db.query(Translation).count() == 1
    assert user_client.get(f"/api/translations/{translation_id}").json()["translatedText"] == stub_claude.reply


def test_delete_translation(user_client, stub_claude):
    translation_id = user_client.post("/api/translate", json=translate_payload()).json()["id"]

    response = user_client.delete(f"/api/translations/{translation_id}")

    assert response.status_code == 204
    assert user_client.get(f"/api/translations/{translation_id}").status_code == 404
    assert user_client.delete(f"/api/translations/{translation_id}").status_code == 204


def test_add_translation_versions(user_client, stub_claude):
    translation_id = user_client.post("/api/translate", json=translate_payload()).json()["id"]

    user_client.post(f"/api/translations/{translation_id}/versions", json={"translatedText": "Edit one"})
    response = user_client.post(f"/api/translations/{translation_id}/versions", json={"translatedText": "Edit two"})

    assert response.status_code == 200
    body = response.json()
    assert body["translatedText"] == "Edit two"
    assert [v["translatedText"] for v in body["versions"]] == ["Edit one", "Edit two"]


def test_add_version_to_unknown_translation(user_client):
    response = user_client.post("/api/translations/missing/versions", json={"translatedText": "text"})

    assert response.status_code == 404
