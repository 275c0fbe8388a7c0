import os

os.environ['DATABASE_URL'] = 'sqlite:///:memory:'
os.environ.pop('MAIL_API_KEY', None)

import pytest

import mailer
import storage
from app import app as flask_app
from models import db


@pytest.fixture
def app():
    flask_app.config.update(TESTING=True, ALLOW_DEMO_PAYMENTS=True, RAZORPAY_KEY_SECRET='')
    with flask_app.app_context():
        db.create_all()
        yield flask_app
        db.session.remove()
        db.drop_all()
    storage.memory_bookings.clear()
    storage.memory_users.clear()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def sent_mail(monkeypatch):
    """Capture outgoing mail instead of starting delivery threads."""
    sent = []

    def fake_send_async(config, to_email, to_name, subject, html):
        sent.append({'to': to_email, 'name': to_name, 'subject': subject, 'html': html})

    monkeypatch.setattr(mailer, 'send_async', fake_send_async)
    return sent


@pytest.fixture
def order():
    return {
        'eventTitle': 'Sunburn Festival',
        'eventDate': '2030-12-28',
        'eventTime': '16:00',
        'eventLocation': 'Vagator, Goa',
        'ticketQuantity': 2,
        'userName': 'Asha Rao',
        'userEmail': 'asha@example.com',
        'userPhone': '9876543210',
        'price': 500,
        'totalAmount': 1000,
        'paymentMethod': 'demo',
        'paymentToken': 'demo_token_1',
        'paymentId': 'DEMO1',
    }


@pytest.fixture
def new_event():
    return {
        'title': 'Jazz by the Bay',
        'category': 'music',
        'description': 'An evening of live jazz on the waterfront.',
        'date': '2030-11-15',
        'time': '19:30',
        'location': 'Marine Drive, Mumbai',
        'city': 'Mumbai',
        'price': 799,
        'maxAttendees': 3,
        'contactEmail': 'host@example.com',
        'createdBy': 'Blue Note Collective',
        'createdByEmail': 'host@example.com',
    }
