from datetime import datetime, timedelta
from portal import db, storage
from portal.models import Admin, Event, Review, Payment, GiftImage, RateLimitEntry
from portal.services import submit_payment
from portal.utils.auth import generate_token, ROLE_MEMBER
from portal.utils.clock import utcnow


class TestAdminAuth:
    def test_login(self, client, admin):
        response = client.post('/api/admin/auth/login', json={'username': 'admin', 'password': 'adminpass'})
        assert response.status_code == 200
        assert response.get_json()['admin']['username'] == 'admin'

    def test_login_bad_password(self, client, admin):
        response = client.post('/api/admin/auth/login', json={'username': 'admin', 'password': 'nope'})
        assert response.status_code == 401

    def test_member_token_forbidden(self, client, make_member):
        token = generate_token(make_member().id, ROLE_MEMBER)
        response = client.get('/api/admin/members', headers={'Authorization': f'Bearer {token}'})
        assert response.status_code == 403

    def test_manage_admins(self, client, admin, admin_headers):
        response = client.post('/api/admin/admins', json={'username': 'second', 'password': 'secret123'},
                               headers=admin_headers)
        assert response.status_code == 201
        second_id = response.get_json()['id']

        response = client.post('/api/admin/admins', json={'username': 'second', 'password': 'secret123'},
                               headers=admin_headers)
        assert response.status_code == 409

        assert client.delete(f'/api/admin/admins/{admin.id}', headers=admin_headers).status_code == 400
        assert client.delete(f'/api/admin/admins/{second_id}', headers=admin_headers).status_code == 200
        assert Admin.query.count() == 1


class TestAdminMembers:
    def test_list_and_filter(self, client, make_member, admin_headers):
        make_member(status='approved', name='Alice')
        make_member(status='pending_approval', name='Bob')

        response = client.get('/api/admin/members?status=pending_approval', headers=admin_headers)
        body = response.get_json()
        assert body['total_count'] == 1
        assert body['members'][0]['name'] == 'Bob'

        response = client.get('/api/admin/members?search=ali', headers=admin_headers)
        assert [m['name'] for m in response.get_json()['members']] == ['Alice']

    def test_get_member_detail(self, client, make_member, admin_headers):
        member = make_member(status='pending_payment')
        submit_payment(member.id, 499)

        response = client.get(f'/api/admin/members/{member.id}', headers=admin_headers)
        body = response.get_json()
        assert len(body['payments']) == 1
        assert body['gift_delivery'] is None

    def test_edit_member(self, client, make_member, admin_headers):
        member = make_member(status='pending_payment')

        response = client.put(f'/api/admin/members/{member.id}', json={
            'status': 'approved',
            'membership_start': '2025-01-01T00:00:00Z',
            'membership_end': '2025-01-31T00:00:00Z',
        }, headers=admin_headers)
        assert response.status_code == 200
        body = response.get_json()
        assert body['status'] == 'approved'
        assert body['membership_end'] == '2025-01-31T00:00:00'

    def test_edit_half_window(self, client, make_member, admin_headers):
        member = make_member()
        response = client.put(f'/api/admin/members/{member.id}',
                              json={'membership_start': '2025-01-01T00:00:00'}, headers=admin_headers)
        assert response.status_code == 400
        assert response.get_json()['kind'] == 'invalid'

    def test_edit_unknown_member(self, client, admin_headers):
        response = client.put('/api/admin/members/999', json={'name': 'X'}, headers=admin_headers)
        assert response.status_code == 404

    def test_reset_password(self, client, make_member, admin_headers):
        member = make_member()
        response = client.post(f'/api/admin/members/{member.id}/reset-password', json={},
                               headers=admin_headers)
        new_password = response.get_json()['new_password']

        response = client.post('/api/auth/login', json={'phone': member.phone, 'password': new_password})
        assert response.status_code == 200


class TestAdminPayments:
    def test_verify_flow(self, client, make_member, admin_headers):
        member = make_member(status='pending_payment')
        payment = submit_payment(member.id, 499)

        response = client.get('/api/admin/payments', headers=admin_headers)
        body = response.get_json()
        assert body['summary']['pending'] == 1
        assert body['payments'][0]['member_status'] == 'pending_approval'

        response = client.put(f'/api/admin/payments/{payment.id}/verify', json={'status': 'verified'},
                              headers=admin_headers)
        assert response.status_code == 200
        assert storage.get_member(member.id).status == 'approved'
        end = storage.get_member(member.id).membership_end

        response = client.put(f'/api/admin/payments/{payment.id}/verify', json={'status': 'verified'},
                              headers=admin_headers)
        assert response.status_code == 409
        assert response.get_json()['kind'] == 'already_processed'
        assert storage.get_member(member.id).membership_end == end

    def test_verify_bad_decision(self, client, make_member, admin_headers):
        payment = submit_payment(make_member(status='pending_payment').id, 499)
        response = client.put(f'/api/admin/payments/{payment.id}/verify', json={'status': 'maybe'},
                              headers=admin_headers)
        assert response.status_code == 400
        assert db.session.get(Payment, payment.id).status == 'pending'

    def test_verify_unknown(self, client, admin_headers):
        response = client.put('/api/admin/payments/999/verify', json={'status': 'verified'},
                              headers=admin_headers)
        assert response.status_code == 404


class TestAdminGifts:
    def test_create_and_update_gift(self, client, admin_headers):
        response = client.post('/api/admin/gifts', json={'name': 'Mug', 'monthly_quota': 10},
                               headers=admin_headers)
        assert response.status_code == 201
        gift = response.get_json()
        assert gift['remaining_quota'] == 10

        response = client.put(f"/api/admin/gifts/{gift['id']}", json={'monthly_quota': None, 'active': False},
                              headers=admin_headers)
        body = response.get_json()
        assert body['remaining_quota'] is None
        assert body['active'] is False

        response = client.get('/api/admin/gifts-catalog', headers=admin_headers)
        assert len(response.get_json()) == 1

    def test_negative_quota_rejected(self, client, admin_headers):
        response = client.post('/api/admin/gifts', json={'name': 'Mug', 'monthly_quota': -1},
                               headers=admin_headers)
        assert response.status_code == 400

    def test_update_delivery_tracking(self, client, make_member, make_gift, make_delivery, admin_headers):
        delivery = make_delivery(make_member(), make_gift(), utcnow())

        response = client.put(f'/api/admin/gift-deliveries/{delivery.id}', json={
            'status': 'sent', 'tracking_number': 'TH123456', 'tracking_url': 'https://track/TH123456',
        }, headers=admin_headers)
        assert response.status_code == 200
        assert response.get_json()['status'] == 'sent'

        response = client.get('/api/admin/gift-deliveries', headers=admin_headers)
        body = response.get_json()
        assert body['summary']['sent'] == 1
        assert body['deliveries'][0]['tracking_number'] == 'TH123456'

    def test_update_delivery_bad_status(self, client, make_member, make_gift, make_delivery, admin_headers):
        delivery = make_delivery(make_member(), make_gift(), utcnow())
        response = client.put(f'/api/admin/gift-deliveries/{delivery.id}', json={'status': 'lost'},
                              headers=admin_headers)
        assert response.status_code == 400


class TestAdminContent:
    def test_events_crud(self, client, admin_headers):
        response = client.post('/api/admin/events', json={
            'title': 'Live Q&A', 'event_date': '2025-03-01T19:00', 'platform': 'zoom',
            'event_url': 'https://zoom.us/j/1',
        }, headers=admin_headers)
        assert response.status_code == 201
        event_id = response.get_json()['id']

        response = client.put(f'/api/admin/events/{event_id}', json={'replay_url': 'https://vimeo.com/2'},
                              headers=admin_headers)
        assert response.get_json()['replay_url'] == 'https://vimeo.com/2'

        assert client.delete(f'/api/admin/events/{event_id}', headers=admin_headers).status_code == 200
        assert Event.query.count() == 0

    def test_event_bad_platform(self, client, admin_headers):
        response = client.post('/api/admin/events', json={
            'title': 'Live', 'event_date': '2025-03-01T19:00', 'platform': 'teams', 'event_url': 'x',
        }, headers=admin_headers)
        assert response.status_code == 400

    def test_moderate_review(self, client, make_member, admin_headers):
        review = Review(member_id=make_member().id, rating=5, title='Great', content='Yes')
        db.session.add(review)
        db.session.commit()

        response = client.put(f'/api/admin/reviews/{review.id}', json={'status': 'approved'},
                              headers=admin_headers)
        assert response.status_code == 200
        assert response.get_json()['approved_at'] is not None

        response = client.get('/api/admin/reviews?status=approved', headers=admin_headers)
        assert len(response.get_json()) == 1

    def test_terms_and_settings_upsert(self, client, admin, admin_headers):
        response = client.put('/api/admin/terms', json={'content': 'Rules', 'require_read': True},
                              headers=admin_headers)
        assert response.status_code == 200
        assert response.get_json()['require_read'] is True

        client.put('/api/admin/terms', json={'show_on_payment': False}, headers=admin_headers)
        terms = client.get('/api/admin/terms', headers=admin_headers).get_json()
        assert terms['content'] == 'Rules'
        assert terms['show_on_payment'] is False

        response = client.put('/api/admin/site-settings', json={'line_url': 'https://line.me/x', 'membership_price': 599},
                              headers=admin_headers)
        assert response.status_code == 200
        assert client.get('/api/site-settings').get_json() == {'line_url': 'https://line.me/x'}

        response = client.put('/api/admin/site-settings', json={'membership_price': 'free'},
                              headers=admin_headers)
        assert response.status_code == 400


class TestStats:
    def test_dashboard(self, client, make_member, admin_headers):
        now = utcnow()
        make_member(status='approved', membership_start=now - timedelta(days=27),
                    membership_end=now + timedelta(days=3))
        make_member(status='approved', membership_start=now, membership_end=now + timedelta(days=30))
        make_member(status='pending_approval')
        db.session.add(Review(member_id=make_member().id, rating=4, title='a', content='b'))
        db.session.add(Review(member_id=make_member().id, rating=5, title='c', content='d'))
        db.session.commit()

        body = client.get('/api/admin/dashboard/stats', headers=admin_headers).get_json()
        assert body['total_users'] == 5
        assert body['active_members'] == 2
        assert body['expiring_soon'] == 1
        assert body['pending_approvals'] == 1
        assert body['total_reviews'] == 2
        assert body['average_rating'] == 4.5

    def test_location_stats(self, client, make_member, make_gift, make_delivery, admin_headers):
        gift = make_gift()
        now = datetime(2025, 2, 1)
        make_delivery(make_member(), gift, now, province='Bangkok')
        make_delivery(make_member(), gift, now, province='Bangkok')
        make_delivery(make_member(), gift, now, province='Chiang Mai', district='Mueang')

        body = client.get('/api/admin/location-stats', headers=admin_headers).get_json()
        assert body['total'] == 3
        assert body['provinces'][0] == {'name': 'Bangkok', 'count': 2}
        assert {'name': 'Chiang Mai', 'count': 1} in body['provinces']


class TestGiftImages:
    def test_images_listed_in_sort_order(self, client, make_member, make_gift, admin_headers, member_headers):
        gift = make_gift(monthly_quota=3)
        for url, order in (('https://img/b.jpg', 2), ('https://img/a.jpg', 1)):
            response = client.post('/api/admin/gift-images', json={
                'gift_id': gift.id, 'image_url': url, 'sort_order': order,
            }, headers=admin_headers)
            assert response.status_code == 201

        catalog = client.get('/api/admin/gifts-catalog', headers=admin_headers).get_json()
        assert [i['image_url'] for i in catalog[0]['images']] == ['https://img/a.jpg', 'https://img/b.jpg']

        member_catalog = client.get('/api/member/gifts', headers=member_headers(make_member())).get_json()
        assert [i['sort_order'] for i in member_catalog[0]['images']] == [1, 2]
        assert member_catalog[0]['remaining_quota'] == 3

    def test_gift_without_images(self, client, make_gift, admin_headers):
        make_gift()
        catalog = client.get('/api/admin/gifts-catalog', headers=admin_headers).get_json()
        assert catalog[0]['images'] == []

    def test_delete_image(self, client, make_gift, admin_headers):
        gift = make_gift()
        image_id = client.post('/api/admin/gift-images', json={
            'gift_id': gift.id, 'image_url': 'https://img/a.jpg',
        }, headers=admin_headers).get_json()['id']

        assert client.delete(f'/api/admin/gift-images/{image_id}', headers=admin_headers).status_code == 200
        assert GiftImage.query.count() == 0
        assert client.delete(f'/api/admin/gift-images/{image_id}', headers=admin_headers).status_code == 404

    def test_image_for_unknown_gift(self, client, admin_headers):
        response = client.post('/api/admin/gift-images', json={'gift_id': 999, 'image_url': 'https://img/a.jpg'},
                               headers=admin_headers)
        assert response.status_code == 404

    def test_image_requires_url(self, client, make_gift, admin_headers):
        response = client.post('/api/admin/gift-images', json={'gift_id': make_gift().id, 'image_url': 5},
                               headers=admin_headers)
        assert response.status_code == 400


class TestInputTypes:
    EVENT = {
        'title': 'Live Q&A', 'event_date': '2025-03-01T19:00', 'platform': 'zoom',
        'event_url': 'https://zoom.us/j/1',
    }

    def test_event_active_must_be_boolean(self, client, admin_headers):
        response = client.post('/api/admin/events', json=dict(self.EVENT, active='no'), headers=admin_headers)
        assert response.status_code == 400
        assert 'active must be a boolean' in response.get_json()['error']
        assert Event.query.count() == 0

    def test_event_update_active_must_be_boolean(self, client, admin_headers):
        event_id = client.post('/api/admin/events', json=self.EVENT, headers=admin_headers).get_json()['id']

        response = client.put(f'/api/admin/events/{event_id}', json={'active': 1}, headers=admin_headers)
        assert response.status_code == 400
        assert db.session.get(Event, event_id).active is True

    def test_event_text_fields_must_be_strings(self, client, admin_headers):
        response = client.post('/api/admin/events', json=dict(self.EVENT, replay_url=['x']),
                               headers=admin_headers)
        assert response.status_code == 400

    def test_review_pros_must_be_string(self, client, make_member, member_headers):
        response = client.post('/api/member/reviews', json={
            'rating': 4, 'title': 'Good', 'content': 'Nice', 'pros': {'a': 1}, 'cons': 3,
        }, headers=member_headers(make_member()))
        assert response.status_code == 400
        errors = response.get_json()['error']
        assert 'pros must be a string' in errors
        assert 'cons must be a string' in errors
        assert Review.query.count() == 0


class TestRateLimits:
    def test_member_login_limited(self, client, make_member):
        member = make_member()
        for _ in range(5):
            response = client.post('/api/auth/login', json={'phone': member.phone, 'password': 'wrong'})
            assert response.status_code == 401

        response = client.post('/api/auth/login', json={'phone': member.phone, 'password': 'secret123'})
        assert response.status_code == 429

    def test_registration_limited(self, client):
        for i in range(3):
            response = client.post('/api/auth/register', json={
                'phone': f'089000000{i}', 'password': 'secret123', 'name': f'User {i}',
            })
            assert response.status_code == 201

        response = client.post('/api/auth/register', json={
            'phone': '0890000009', 'password': 'secret123', 'name': 'One more',
        })
        assert response.status_code == 429

    def test_admin_login_limited(self, client, admin):
        for _ in range(5):
            client.post('/api/admin/auth/login', json={'username': 'admin', 'password': 'nope'})

        response = client.post('/api/admin/auth/login', json={'username': 'admin', 'password': 'adminpass'})
        assert response.status_code == 429

    def test_limits_are_per_client(self, client, make_member):
        member = make_member()
        for _ in range(5):
            client.post('/api/auth/login', json={'phone': member.phone, 'password': 'wrong'},
                        environ_base={'REMOTE_ADDR': '10.0.0.1'})

        response = client.post('/api/auth/login', json={'phone': member.phone, 'password': 'secret123'},
                               environ_base={'REMOTE_ADDR': '10.0.0.2'})
        assert response.status_code == 200

    def test_cleanup_removes_old_entries(self, app):
        db.session.add(RateLimitEntry(key='1.2.3.4', endpoint='login', timestamp=utcnow() - timedelta(minutes=5)))
        db.session.add(RateLimitEntry(key='1.2.3.4', endpoint='login', timestamp=utcnow()))
        db.session.commit()

        result = app.test_cli_runner().invoke(args=['cleanup-rate-limits'])
        assert 'Removed 1' in result.output
        assert RateLimitEntry.query.count() == 1
