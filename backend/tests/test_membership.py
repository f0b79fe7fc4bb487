from datetime import datetime, timedelta
import pytest
from portal import storage
from portal.services import (
    register_member, submit_payment, verify_payment, apply_admin_edit,
    reset_member_password, PortalError,
)
from portal.models import Payment


class TestRegistration:
    def test_new_member_awaits_payment(self, app):
        member = register_member('0891234567', 'secret123', 'Somchai', prefix='Mr.')

        assert member.status == 'pending_payment'
        assert member.membership_start is None
        assert member.membership_end is None
        assert member.check_password('secret123')
        assert 'password_hash' not in member.to_dict()

    def test_duplicate_phone(self, app):
        register_member('0891234567', 'secret123', 'Somchai')

        with pytest.raises(PortalError) as exc:
            register_member('0891234567', 'other123', 'Somsri')
        assert exc.value.kind == 'phone_taken'
        assert exc.value.status_code == 409


class TestPaymentSubmission:
    def test_first_payment_moves_to_pending_approval(self, make_member):
        member = make_member(status='pending_payment')

        payment = submit_payment(member.id, 499, slip_url='https://example.com/slip.jpg')

        assert payment.status == 'pending'
        assert payment.amount == 499
        assert storage.get_member(member.id).status == 'pending_approval'

    def test_renewal_keeps_approved(self, make_member):
        start = datetime(2025, 2, 1)
        member = make_member(status='approved', membership_start=start,
                             membership_end=start + timedelta(days=30))

        submit_payment(member.id, 499)

        member = storage.get_member(member.id)
        assert member.status == 'approved'
        assert member.membership_end == start + timedelta(days=30)

    @pytest.mark.parametrize('status', ['pending_approval', 'disapproved'])
    def test_other_statuses_unchanged(self, make_member, status):
        member = make_member(status=status)
        submit_payment(member.id, 499)
        assert storage.get_member(member.id).status == status

    def test_unknown_member(self, app):
        with pytest.raises(PortalError) as exc:
            submit_payment(12345, 499)
        assert exc.value.kind == 'not_found'
        assert Payment.query.count() == 0


class TestLifecycle:
    def test_first_time_member_is_approved_for_30_days(self, make_member, admin):
        member = make_member(status='pending_payment')
        payment = submit_payment(member.id, 499)
        assert storage.get_member(member.id).status == 'pending_approval'

        verified_at = datetime(2025, 3, 10, 8, 0)
        verify_payment(payment.id, 'verified', admin.id, now=verified_at)

        member = storage.get_member(member.id)
        assert member.status == 'approved'
        assert member.membership_start == verified_at
        assert member.membership_end == verified_at + timedelta(days=30)
        assert member.has_active_membership(verified_at + timedelta(days=29))
        assert not member.has_active_membership(verified_at + timedelta(days=31))

    def test_renewal_resets_window_without_stacking(self, make_member, admin):
        old_start = datetime(2025, 3, 1)
        member = make_member(status='approved', membership_start=old_start,
                             membership_end=old_start + timedelta(days=30))

        payment = submit_payment(member.id, 499)
        assert storage.get_member(member.id).status == 'approved'

        # Ten days still left on the old window; they are discarded
        verified_at = datetime(2025, 3, 21)
        verify_payment(payment.id, 'verified', admin.id, now=verified_at)

        member = storage.get_member(member.id)
        assert member.status == 'approved'
        assert member.membership_start == verified_at
        assert member.membership_end == verified_at + timedelta(days=30)


class TestAdminEdit:
    def test_any_status_can_be_set(self, make_member):
        member = make_member(status='pending_payment')

        apply_admin_edit(member.id, {'status': 'disapproved'})
        assert storage.get_member(member.id).status == 'disapproved'

        apply_admin_edit(member.id, {'status': 'approved'})
        assert storage.get_member(member.id).status == 'approved'

    def test_window_set_together(self, make_member):
        member = make_member(status='approved')
        start, end = datetime(2025, 1, 1), datetime(2025, 1, 31)

        apply_admin_edit(member.id, {'membership_start': start, 'membership_end': end})

        member = storage.get_member(member.id)
        assert (member.membership_start, member.membership_end) == (start, end)

    def test_half_window_rejected(self, make_member):
        member = make_member(status='approved')

        with pytest.raises(PortalError) as exc:
            apply_admin_edit(member.id, {'membership_start': datetime(2025, 1, 1)})
        assert exc.value.kind == 'invalid'
        assert storage.get_member(member.id).membership_start is None

    def test_clearing_only_one_end_rejected(self, make_member):
        member = make_member(status='approved', membership_start=datetime(2025, 1, 1),
                             membership_end=datetime(2025, 1, 31))

        with pytest.raises(PortalError) as exc:
            apply_admin_edit(member.id, {'membership_end': None})
        assert exc.value.kind == 'invalid'

    def test_start_after_end_rejected(self, make_member):
        member = make_member(status='approved')

        with pytest.raises(PortalError) as exc:
            apply_admin_edit(member.id, {
                'membership_start': datetime(2025, 2, 1),
                'membership_end': datetime(2025, 1, 1),
            })
        assert exc.value.kind == 'invalid'

    def test_invalid_status_rejected(self, make_member):
        member = make_member(status='approved')

        with pytest.raises(PortalError) as exc:
            apply_admin_edit(member.id, {'status': 'active'})
        assert exc.value.kind == 'invalid'

    def test_phone_taken(self, make_member):
        make_member(phone='0899999999')
        member = make_member()

        with pytest.raises(PortalError) as exc:
            apply_admin_edit(member.id, {'phone': '0899999999'})
        assert exc.value.kind == 'phone_taken'

    def test_password_not_editable(self, make_member):
        member = make_member()
        old_hash = member.password_hash

        apply_admin_edit(member.id, {'password_hash': 'x', 'id': 999, 'name': 'Renamed'})

        member = storage.get_member(member.id)
        assert member.name == 'Renamed'
        assert member.password_hash == old_hash

    def test_reset_password(self, make_member):
        member = make_member()

        member, new_password = reset_member_password(member.id)

        assert len(new_password) >= 12
        assert member.check_password(new_password)
        assert not member.check_password('secret123')
