from datetime import timedelta

from app.models.database import AuditLog, TranslationVersion, utcnow
from app.services import storage


def make_translation(db, user_id="user-1", translated_text="Translated text."):
    return storage.create_translation(
        db,
        user_id=user_id,
        source_language="ar",
        target_language="en",
        source_text="نص عربي",
        translated_text=translated_text,
        document_type="contract",
        purpose="court",
        tone="formal",
        jurisdiction="qatar",
    )


def make_memorandum(db, user_id="user-1", defense_points=None):
    return storage.create_memorandum(
        db,
        user_id=user_id,
        type="defense_memorandum",
        language="en",
        court_name="Court of Appeal",
        case_number="2024/55",
        case_facts="Facts of the case.",
        legal_requests="Dismiss the claim.",
        strength="neutral",
        generated_content="Memorandum body.",
        defense_points=defense_points,
    )


def test_created_translation_reads_back(db):
    created = make_translation(db)

    fetched = storage.get_translation(db, created.id)

    assert fetched.user_id == "user-1"
    assert fetched.source_text == "نص عربي"
    assert fetched.translated_text == "Translated text."
    assert fetched.tone == "formal"
    assert fetched.created_at is not None
    assert fetched.versions == []


def test_get_unknown_translation_returns_none(db):
    assert storage.get_translation(db, "missing") is None


def test_list_translations_is_scoped_and_newest_first(db):
    older = make_translation(db, translated_text="older")
    older.created_at = utcnow() - timedelta(hours=1)
    db.commit()
    newer = make_translation(db, translated_text="newer")
    make_translation(db, user_id="user-2")

    listed = storage.list_translations(db, "user-1")

    assert [t.id for t in listed] == [newer.id, older.id]
    assert storage.list_translations(db, "user-1", limit=1)[0].id == newer.id
    assert storage.list_translations(db, "nobody") == []


def test_versions_are_appended_in_order(db):
    translation = make_translation(db)

    for n in range(1, 4):
        storage.add_translation_version(db, translation.id, f"revision {n}")

    db.expire_all()
    fetched = storage.get_translation(db, translation.id)
    assert fetched.translated_text == "revision 3"
    assert [v.translated_text for v in fetched.versions] == ["revision 1", "revision 2", "revision 3"]
    assert [v.position for v in fetched.versions] == [1, 2, 3]


def test_add_version_to_unknown_translation_returns_none(db):
    assert storage.add_translation_version(db, "missing", "text") is None
    assert db.query(TranslationVersion).count() == 0


def test_delete_translation_removes_versions(db):
    translation = make_translation(db)
    storage.add_translation_version(db, translation.id, "revision 1")
    translation_id = translation.id

    storage.delete_translation(db, translation_id)

    db.expire_all()
    assert storage.get_translation(db, translation_id) is None
    assert db.query(TranslationVersion).count() == 0


def test_delete_unknown_translation_is_noop(db):
    make_translation(db)

    storage.delete_translation(db, "missing")

    assert len(storage.list_translations(db, "user-1")) == 1


def test_memorandum_round_trip_and_versions(db):
    memorandum = make_memorandum(db, defense_points="No notice was served.")

    storage.add_memorandum_version(db, memorandum.id, "Second draft.")

    db.expire_all()
    fetched = storage.get_memorandum(db, memorandum.id)
    assert fetched.defense_points == "No notice was served."
    assert fetched.generated_content == "Second draft."
    assert [v.content for v in fetched.versions] == ["Second draft."]


def test_delete_memorandum(db):
    memorandum_id = make_memorandum(db).id

    storage.delete_memorandum(db, memorandum_id)

    db.expire_all()
    assert storage.get_memorandum(db, memorandum_id) is None
    assert storage.add_memorandum_version(db, memorandum_id, "late edit") is None


def test_user_stats_count_only_own_records(db):
    for _ in range(7):
        make_translation(db)
    make_memorandum(db)
    make_memorandum(db, user_id="user-2")

    stats = storage.get_user_stats(db, "user-1")

    assert stats["total_translations"] == 7
    assert stats["total_memorandums"] == 1
    assert len(stats["recent_translations"]) == 5
    assert len(stats["recent_memorandums"]) == 1


def test_site_settings_are_a_singleton(db):
    assert storage.get_site_settings(db) is None

    storage.update_site_settings(db, {"app_title": "Chambers"})
    updated = storage.update_site_settings(db, {"footer_text": "All rights reserved"})

    assert updated.id == storage.SITE_SETTINGS_ID
    assert updated.app_title == "Chambers"
    assert updated.footer_text == "All rights reserved"
    assert updated.updated_at is not None


def test_default_site_settings():
    defaults = storage.default_site_settings()

    assert defaults["app_title"] == "AI Legal System"
    assert defaults["logo_url"] is None


def test_audit_limit_is_clamped():
    assert storage.clamp_audit_limit(9999) == storage.MAX_AUDIT_LOG_LIMIT
    assert storage.clamp_audit_limit(0) == 1
    assert storage.clamp_audit_limit(25) == 25


def test_list_audit_logs_newest_first(db):
    now = utcnow()
    db.add_all([
        AuditLog(action="login", created_at=now - timedelta(minutes=2)),
        AuditLog(action="logout", created_at=now),
        AuditLog(action="register", created_at=now - timedelta(minutes=5)),
    ])
    db.commit()

    entries = storage.list_audit_logs(db, limit=2)

    assert [entry.action for entry in entries] == ["logout", "login"]
