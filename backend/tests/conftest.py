import pytest
from datetime import datetime
from portal import create_app, db, storage
from portal.models import Admin
from portal.utils.auth import generate_token, ROLE_MEMBER, ROLE_ADMIN

DELIVERY = {
    'delivery_name': 'Somchai Jaidee',
    'delivery_phone': '0812345678',
    'house_number': '99/1',
    'moo_soi': 'Soi 5',
    'street': 'Sukhumvit',
    'subdistrict': 'Khlong Toei',
    'district': 'Khlong Toei',
    'province': 'Bangkok',
    'postal_code': '10110',
    'delivery_date': datetime(2025, 2, 20),
}


@pytest.fixture
def app(tmp_path):
    app = create_app({
        'TESTING': True,
        'SECRET_KEY': 'test-secret',
        'JWT_SECRET_KEY': 'test-jwt-secret',
        'SQLALCHEMY_DATABASE_URI': f"sqlite:///{tmp_path / 'portal.db'}",
        'AUDIT_LOG_FILE': str(tmp_path / 'audit.log'),
    })
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def make_member(app):
    counter = {'n': 0}

    def _make(status='approved', **fields):
        counter['n'] += 1
        member = storage.create_member(
            password='secret123',
            phone=fields.pop('phone', f'08100000{counter["n"]:02d}'),
            name=fields.pop('name', f'Member {counter["n"]}'),
            status=status,
            **fields
        )
        db.session.commit()
        return member
    return _make


@pytest.fixture
def make_gift(app):
    def _make(monthly_quota=None, active=True, name='Welcome Box'):
        gift = storage.create_gift(name=name, monthly_quota=monthly_quota, active=active)
        db.session.commit()
        return gift
    return _make


@pytest.fixture
def make_delivery(app):
    """Insert a delivery directly, bypassing the claim rules."""
    def _make(member, gift, created_at, **fields):
        data = dict(DELIVERY)
        data.update(fields)
        delivery = storage.create_gift_delivery(
            member_id=member.id, gift_id=gift.id,
            created_at=created_at, updated_at=created_at, **data
        )
        db.session.commit()
        return delivery
    return _make


@pytest.fixture
def admin(app):
    admin = Admin(username='admin')
    admin.set_password('adminpass')
    db.session.add(admin)
    db.session.commit()
    return admin


@pytest.fixture
def admin_headers(admin):
    return {'Authorization': f'Bearer {generate_token(admin.id, ROLE_ADMIN)}'}


@pytest.fixture
def member_headers():
    def _headers(member):
        return {'Authorization': f'Bearer {generate_token(member.id, ROLE_MEMBER)}'}
    return _headers


@pytest.fixture
def delivery_body():
    def _body(gift_id):
        body = dict(DELIVERY)
        body['delivery_date'] = '2025-02-20T00:00:00'
        body['gift_id'] = gift_id
        return body
    return _body
