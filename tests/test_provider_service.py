"""
Tests for the provider lifecycle service (create, edit, soft delete, list).
"""

import re
from datetime import datetime

import pytest
from fastapi import HTTPException
from pydantic import ValidationError

from app.models import Provider
from app.schemas.provider import ProviderUpdate
from app.services import provider_service
from app.utils.security import create_delete_token

MARKER_RE = re.compile(r"^-DEL-[0-9a-f]{13}$")


class TestCreate:

    def test_new_provider_is_active_with_equal_timestamps(self, make_provider):
        provider = make_provider()

        assert provider.id is not None
        assert provider.active is True
        assert provider.created_at == provider.updated_at

    def test_fields_are_stored(self, make_provider):
        provider = make_provider(type="crucero")

        assert provider.name == "Acme"
        assert provider.email == "a@acme.com"
        assert provider.phone == "6123456789"
        assert provider.type == "crucero"

    def test_type_is_optional(self, make_provider):
        assert make_provider(type=None).type is None

    def test_duplicate_active_email_is_rejected_without_side_effects(
        self, db, make_provider
    ):
        make_provider()

        with pytest.raises(HTTPException) as exc_info:
            make_provider(phone="699999999")

        assert exc_info.value.status_code == 409
        assert exc_info.value.detail == "flash.error_generic"
        assert db.query(Provider).count() == 1

    def test_duplicate_active_phone_is_rejected(self, make_provider):
        make_provider()

        with pytest.raises(HTTPException) as exc_info:
            make_provider(email="otro@acme.com")

        assert exc_info.value.status_code == 409


class TestListActive:

    def test_only_active_providers_are_listed(self, db, make_provider):
        kept = make_provider()
        gone = make_provider(email="b@acme.com", phone="600000001")
        provider_service.soft_delete_provider(db, gone.id, create_delete_token(gone.id))

        listed = provider_service.list_active(db)

        assert [p.id for p in listed] == [kept.id]
        assert all(p.active for p in listed)

    def test_get_unknown_provider_is_404(self, db):
        with pytest.raises(HTTPException) as exc_info:
            provider_service.get_provider(db, 999)
        assert exc_info.value.status_code == 404


class TestUpdate:

    def _payload(self, **overrides):
        data = {"name": "Acme", "email": "a@acme.com", "phone": "6123456789"}
        data.update(overrides)
        return ProviderUpdate(**data)

    def test_edit_keeps_created_at_and_moves_updated_at(
        self, db, make_provider, frozen_clock
    ):
        frozen_clock(datetime(2026, 1, 10, 8, 0))
        provider = make_provider()
        frozen_clock(datetime(2026, 1, 11, 9, 30))

        updated = provider_service.update_provider(
            db, provider.id, self._payload(name="Acme Travel")
        )

        assert updated.name == "Acme Travel"
        assert updated.created_at == datetime(2026, 1, 10, 8, 0)
        assert updated.updated_at == datetime(2026, 1, 11, 9, 30)
        assert updated.created_at <= updated.updated_at

    def test_omitted_type_is_left_untouched(self, db, make_provider):
        provider = make_provider(type="esqui")

        updated = provider_service.update_provider(db, provider.id, self._payload())

        assert updated.type == "esqui"

    def test_explicit_null_type_clears_it(self, db, make_provider):
        provider = make_provider(type="esqui")

        updated = provider_service.update_provider(
            db, provider.id, self._payload(type=None)
        )

        assert updated.type is None

    def test_active_can_be_toggled_explicitly(self, db, make_provider):
        provider = make_provider()

        updated = provider_service.update_provider(
            db, provider.id, self._payload(active=False)
        )

        assert updated.active is False
        # Toggling through the edit form does not add deletion markers
        assert updated.email == "a@acme.com"
        assert provider_service.list_active(db) == []

    def test_missing_active_keeps_current_value(self, db, make_provider):
        provider = make_provider()

        updated = provider_service.update_provider(db, provider.id, self._payload())

        assert updated.active is True

    def test_unknown_id_is_404(self, db):
        with pytest.raises(HTTPException) as exc_info:
            provider_service.update_provider(db, 42, self._payload())
        assert exc_info.value.status_code == 404

    def test_failed_edit_leaves_prior_state(self, db, make_provider):
        first = make_provider()
        second = make_provider(name="Beta", email="b@acme.com", phone="600000001")

        with pytest.raises(HTTPException) as exc_info:
            provider_service.update_provider(
                db,
                second.id,
                self._payload(name="Beta 2", email=first.email, phone="600000001"),
            )

        assert exc_info.value.status_code == 409
        reloaded = provider_service.get_provider(db, second.id)
        assert reloaded.name == "Beta"
        assert reloaded.email == "b@acme.com"

    def test_database_error_is_500_and_rolls_back(
        self, db, make_provider, break_commit
    ):
        provider = make_provider()
        break_commit()

        with pytest.raises(HTTPException) as exc_info:
            provider_service.update_provider(
                db, provider.id, self._payload(name="Acme Travel", type="parque")
            )

        assert exc_info.value.status_code == 500
        assert exc_info.value.detail == "flash.error_generic"
        reloaded = provider_service.get_provider(db, provider.id)
        assert reloaded.name == "Acme"
        assert reloaded.type == "hotel"

    def test_deactivated_provider_needs_a_fresh_email_to_come_back(
        self, db, make_provider
    ):
        provider = make_provider()
        provider_service.soft_delete_provider(
            db, provider.id, create_delete_token(provider.id)
        )
        db.refresh(provider)

        # The marked email no longer passes the form validation
        with pytest.raises(ValidationError):
            self._payload(email=provider.email, active=True)

        updated = provider_service.update_provider(
            db, provider.id, self._payload(email="vuelve@acme.com", active=True)
        )

        assert updated.active is True
        assert [p.id for p in provider_service.list_active(db)] == [provider.id]


class TestSoftDelete:

    def test_valid_token_deactivates_and_rewrites_fields(
        self, db, make_provider, frozen_clock
    ):
        frozen_clock(datetime(2026, 2, 1, 10, 0))
        provider = make_provider()
        frozen_clock(datetime(2026, 2, 2, 10, 0))

        deleted = provider_service.soft_delete_provider(
            db, provider.id, create_delete_token(provider.id)
        )

        assert deleted is True
        db.refresh(provider)
        assert provider.active is False
        assert provider.name == "Acme (Borrado)"
        assert provider.email.startswith("a@acme.com-DEL-")
        assert MARKER_RE.match(provider.email[len("a@acme.com"):])
        assert provider.phone.startswith("6123456789-DEL-")
        assert len(provider.phone) == 20
        assert provider.created_at == datetime(2026, 2, 1, 10, 0)
        assert provider.updated_at == datetime(2026, 2, 2, 10, 0)

    def test_row_is_kept_in_storage(self, db, make_provider):
        provider = make_provider()
        provider_service.soft_delete_provider(
            db, provider.id, create_delete_token(provider.id)
        )

        assert db.query(Provider).filter(Provider.id == provider.id).count() == 1

    @pytest.mark.parametrize(
        "token",
        [None, "", "not-a-token"],
        ids=["missing", "empty", "garbage"],
    )
    def test_invalid_token_is_a_silent_no_op(self, db, make_provider, token):
        provider = make_provider()
        before = (provider.name, provider.email, provider.phone, provider.updated_at)

        deleted = provider_service.soft_delete_provider(db, provider.id, token)

        assert deleted is False
        db.refresh(provider)
        assert provider.active is True
        assert (provider.name, provider.email, provider.phone, provider.updated_at) == before
        assert [p.id for p in provider_service.list_active(db)] == [provider.id]

    def test_token_for_another_provider_is_rejected(self, db, make_provider):
        provider = make_provider()
        other = make_provider(email="b@acme.com", phone="600000001")

        deleted = provider_service.soft_delete_provider(
            db, provider.id, create_delete_token(other.id)
        )

        assert deleted is False
        assert len(provider_service.list_active(db)) == 2

    def test_unknown_id_is_404(self, db):
        with pytest.raises(HTTPException) as exc_info:
            provider_service.soft_delete_provider(db, 7, create_delete_token(7))
        assert exc_info.value.status_code == 404

    def test_database_error_leaves_provider_untouched(
        self, db, make_provider, break_commit
    ):
        provider = make_provider()
        before = (provider.name, provider.email, provider.phone, provider.updated_at)
        break_commit()

        with pytest.raises(HTTPException) as exc_info:
            provider_service.soft_delete_provider(
                db, provider.id, create_delete_token(provider.id)
            )

        assert exc_info.value.status_code == 500
        assert exc_info.value.detail == "flash.error_generic"
        reloaded = provider_service.get_provider(db, provider.id)
        assert reloaded.active is True
        assert (
            reloaded.name, reloaded.email, reloaded.phone, reloaded.updated_at
        ) == before

    def test_email_and_phone_can_be_reused_after_delete(self, db, make_provider):
        provider = make_provider()
        provider_service.soft_delete_provider(
            db, provider.id, create_delete_token(provider.id)
        )

        again = make_provider()

        assert again.id != provider.id
        assert again.active is True
        assert [p.id for p in provider_service.list_active(db)] == [again.id]

    def test_double_delete_accumulates_suffixes(self, db, make_provider):
        # Deleting twice is not idempotent at the string level: each call
        # appends a new suffix.
        provider = make_provider()
        token = create_delete_token(provider.id)

        assert provider_service.soft_delete_provider(db, provider.id, token)
        assert provider_service.soft_delete_provider(db, provider.id, token)

        db.refresh(provider)
        assert provider.active is False
        assert provider.name == "Acme (Borrado) (Borrado)"
        assert provider.email.count("-DEL-") == 2
        assert len(provider.phone) <= 20

    def test_long_name_and_email_stay_within_column_limits(self, db):
        now = datetime(2026, 2, 1, 10, 0)
        provider = Provider(
            name="N" * 255,
            email="x" * 246 + "@acme.com",
            phone="600000002",
            active=True,
            created_at=now,
            updated_at=now,
        )
        db.add(provider)
        db.commit()

        provider_service.soft_delete_provider(
            db, provider.id, create_delete_token(provider.id)
        )

        db.refresh(provider)
        assert len(provider.name) == 255
        assert provider.name.endswith(" (Borrado)")
        assert len(provider.email) == 255
        assert MARKER_RE.match(provider.email[-18:])


class TestDeletionHelpers:

    def test_marker_format(self):
        assert MARKER_RE.match(provider_service.build_deletion_marker())

    def test_markers_are_unique(self):
        markers = {provider_service.build_deletion_marker() for _ in range(200)}
        assert len(markers) == 200

    @pytest.mark.parametrize("length", range(0, 31))
    def test_phone_never_exceeds_column_limit(self, length):
        marker = provider_service.build_deletion_marker()

        phone = provider_service.mark_deleted_phone("9" * length, marker)

        assert len(phone) <= 20
        assert phone.startswith("9" * min(length, 10))

    def test_short_phone_keeps_whole_marker_prefix(self):
        phone = provider_service.mark_deleted_phone("123", "-DEL-abcdef0123456")

        assert phone == "123-DEL-abcdef012345"
