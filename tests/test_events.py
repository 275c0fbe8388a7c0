import pytest


def _create(client, event, **overrides):
    data = dict(event, **overrides)
    resp = client.post('/api/events/create', json=data)
    assert resp.status_code == 201
    return resp.get_json()['event']['eventId']


class TestEventCrud:

    def test_create(self, client, new_event, sent_mail):
        resp = client.post('/api/events/create', json=new_event)

        assert resp.status_code == 201
        event = resp.get_json()['event']
        assert event['eventId'].startswith('EVENT-')
        assert event['status'] == 'active'
        assert event['price'] == 799
        assert sent_mail[0]['to'] == 'host@example.com'

    def test_create_alias_and_defaults(self, client, sent_mail):
        resp = client.post('/api/events', json={
            'title': 'Pottery', 'category': 'workshop', 'description': 'Clay',
            'date': '2030-01-01', 'time': '10:00', 'location': 'Pune',
            'contactEmail': 'potter@example.com', 'price': 'free',
        })
        event_id = resp.get_json()['event']['eventId']

        event = client.get(f'/api/events/{event_id}').get_json()['event']
        assert event['price'] == 0
        assert event['maxAttendees'] == 100
        assert event['attendees'] == 0
        assert event['createdBy'] == 'Anonymous'
        assert event['highlights'] == []

    def test_decimal_price_is_truncated(self, client, new_event, sent_mail):
        resp = client.post('/api/events/create', json=dict(new_event, price='49.99', maxAttendees='250'))

        event = resp.get_json()['event']
        assert event['price'] == 49
        assert event['maxAttendees'] == 250

    def test_create_requires_fields(self, client, new_event):
        del new_event['contactEmail']

        resp = client.post('/api/events/create', json=new_event)

        assert resp.status_code == 400
        assert resp.get_json()['error'] == 'Missing required fields'

    def test_get_unknown(self, client):
        assert client.get('/api/events/EVENT-missing').status_code == 404

    def test_update_keeps_identity_fields(self, client, new_event, sent_mail):
        event_id = _create(client, new_event)

        resp = client.put(f'/api/events/{event_id}', json={
            'title': 'Jazz by the Sea', 'price': '999',
            'eventId': 'EVENT-hijack', 'createdBy': 'Mallory', 'createdByEmail': 'm@example.com',
        })

        assert resp.status_code == 200
        event = resp.get_json()['event']
        assert event['title'] == 'Jazz by the Sea'
        assert event['price'] == 999
        assert event['eventId'] == event_id
        assert event['createdBy'] == 'Blue Note Collective'
        assert event['createdByEmail'] == 'host@example.com'
        assert event['updatedAt'] is not None

    def test_update_unknown(self, client):
        assert client.put('/api/events/EVENT-missing', json={'title': 'x'}).status_code == 404

    def test_status_change(self, client, new_event, sent_mail):
        event_id = _create(client, new_event)

        resp = client.patch(f'/api/events/{event_id}/status', json={'status': 'cancelled'})

        assert resp.status_code == 200
        assert resp.get_json()['event']['status'] == 'cancelled'

    @pytest.mark.parametrize('status', ['open', None])
    def test_invalid_status(self, client, new_event, sent_mail, status):
        event_id = _create(client, new_event)

        resp = client.patch(f'/api/events/{event_id}/status', json={'status': status})

        assert resp.status_code == 400
        assert resp.get_json()['error'] == 'Invalid status'

    def test_delete(self, client, new_event, sent_mail):
        event_id = _create(client, new_event)

        assert client.delete(f'/api/events/{event_id}').status_code == 200
        assert client.get(f'/api/events/{event_id}').status_code == 404
        assert client.delete(f'/api/events/{event_id}').status_code == 404


class TestEventQueries:

    @pytest.fixture
    def catalogue(self, client, new_event, sent_mail):
        jazz = _create(client, new_event)
        rock = _create(client, new_event, title='Rock Fest', city='Pune', price=1500, maxAttendees=500)
        _create(client, new_event, title='Code Camp', category='tech', description='Hack all night',
                price=0, createdByEmail='dev@example.com', date='2031-02-01')
        old = _create(client, new_event, title='Past Gig', date='2001-01-01')
        client.patch(f'/api/events/{old}/status', json={'status': 'completed'})
        return {'jazz': jazz, 'rock': rock, 'old': old}

    def test_list_active_by_default(self, client, catalogue):
        body = client.get('/api/events').get_json()

        assert body['count'] == 3
        assert 'Past Gig' not in [e['title'] for e in body['events']]

    def test_list_by_status_and_category(self, client, catalogue):
        assert client.get('/api/events?status=completed').get_json()['count'] == 1
        assert client.get('/api/events?category=tech').get_json()['count'] == 1

    def test_list_search_is_case_insensitive(self, client, catalogue):
        body = client.get('/api/events?search=HACK').get_json()

        assert [e['title'] for e in body['events']] == ['Code Camp']

    def test_search_price_and_city(self, client, catalogue):
        body = client.get('/api/events/search?minPrice=500&maxPrice=1000').get_json()
        assert [e['title'] for e in body['events']] == ['Jazz by the Bay']

        body = client.get('/api/events/search?city=pun').get_json()
        assert [e['title'] for e in body['events']] == ['Rock Fest']
        assert body['query']['city'] == 'pun'

    def test_search_rejects_bad_price(self, client, catalogue):
        assert client.get('/api/events/search?minPrice=cheap').status_code == 400

    def test_featured_orders_by_attendees(self, client, catalogue):
        client.post('/api/bookings', json={
            'eventId': catalogue['rock'], 'eventTitle': 'Rock Fest', 'ticketQuantity': 5,
            'userName': 'Ravi', 'userEmail': 'ravi@example.com', 'price': 1500,
        })

        events = client.get('/api/events/featured').get_json()['events']

        assert events[0]['title'] == 'Rock Fest'
        assert events[0]['attendees'] == 5

    def test_upcoming_skips_past_and_sorts_by_date(self, client, catalogue, new_event):
        _create(client, new_event, title='Ancient History', date='1999-05-05')

        events = client.get('/api/events/upcoming').get_json()['events']

        assert [e['date'] for e in events] == sorted(e['date'] for e in events)
        assert 'Ancient History' not in [e['title'] for e in events]

    def test_category_counts(self, client, catalogue):
        counts = client.get('/api/events/categories/counts').get_json()['categories']

        assert counts == {'music': 2, 'tech': 1}

    def test_my_events(self, client, catalogue):
        body = client.get('/api/events/my-events/dev@example.com').get_json()

        assert body['count'] == 1
        assert body['events'][0]['title'] == 'Code Camp'


class TestAttendance:

    def _book(self, client, event_id, quantity):
        return client.post('/api/bookings', json={
            'eventId': event_id, 'eventTitle': 'Jazz by the Bay', 'ticketQuantity': quantity,
            'userName': 'Ravi', 'userEmail': 'ravi@example.com', 'price': 799,
        })

    def test_capacity_is_enforced(self, client, new_event, sent_mail):
        event_id = _create(client, new_event)

        assert self._book(client, event_id, 2).status_code == 201
        resp = self._book(client, event_id, 2)

        assert resp.status_code == 409
        assert resp.get_json()['error'] == 'Not enough tickets available'
        assert client.get(f'/api/events/{event_id}').get_json()['event']['attendees'] == 2

    def test_refund_releases_seats(self, client, new_event, sent_mail):
        event_id = _create(client, new_event)
        booking_id = self._book(client, event_id, 3).get_json()['booking']['bookingId']

        client.post('/api/payments/refund', json={'bookingId': booking_id})

        assert client.get(f'/api/events/{event_id}').get_json()['event']['attendees'] == 0
        assert self._book(client, event_id, 3).status_code == 201

    def test_cancelled_event_not_bookable(self, client, new_event, sent_mail):
        event_id = _create(client, new_event)
        client.patch(f'/api/events/{event_id}/status', json={'status': 'cancelled'})

        assert self._book(client, event_id, 1).status_code == 409

    def test_unknown_event_id_is_not_tracked(self, client):
        assert self._book(client, 'EVENT-elsewhere', 1).status_code == 201

    def test_event_booking_statistics(self, client, new_event, sent_mail):
        event_id = _create(client, new_event)
        self._book(client, event_id, 1)
        second = self._book(client, event_id, 2).get_json()['booking']['bookingId']
        client.post('/api/payments/refund', json={'bookingId': second})

        body = client.get(f'/api/events/{event_id}/bookings').get_json()

        assert body['count'] == 2
        assert body['statistics'] == {
            'totalBookings': 2,
            'confirmedBookings': 1,
            'totalRevenue': 799 * 3,
            'totalTickets': 3,
        }

    def test_ticket_too_large_for_qr_keeps_seats(self, client, new_event, sent_mail):
        event_id = _create(client, new_event)

        resp = client.post('/api/bookings', json={
            'eventId': event_id, 'eventTitle': 'न' * 200, 'eventLocation': 'म' * 200,
            'ticketQuantity': 2, 'userName': 'Ravi', 'userEmail': 'ravi@example.com', 'price': 799,
        })

        assert resp.status_code == 400
        assert resp.get_json()['error'] == 'Booking details are too long to fit on a ticket'
        assert client.get(f'/api/events/{event_id}').get_json()['event']['attendees'] == 0

    def test_paid_booking_too_large_for_qr_keeps_seats(self, client, new_event, order, sent_mail):
        event_id = _create(client, new_event)
        order.update(eventId=event_id, eventTitle='न' * 200, eventLocation='म' * 200)

        resp = client.post('/api/bookings/with-payment', json=order)

        assert resp.status_code == 400
        assert client.get(f'/api/events/{event_id}').get_json()['event']['attendees'] == 0
        assert sent_mail == []

    def test_oversized_field_rejected_before_reserving(self, client, new_event, sent_mail):
        event_id = _create(client, new_event)

        resp = client.post('/api/bookings', json={
            'eventId': event_id, 'eventTitle': 'x' * 201, 'ticketQuantity': 1,
            'userName': 'Ravi', 'userEmail': 'ravi@example.com',
        })

        assert resp.status_code == 400
        assert resp.get_json()['error'] == 'eventTitle is too long'
        assert client.get(f'/api/events/{event_id}').get_json()['event']['attendees'] == 0

    def test_unexpected_failure_releases_seats(self, client, new_event, sent_mail, monkeypatch):
        import tickets

        def explode(payload):
            raise RuntimeError('renderer crashed')

        event_id = _create(client, new_event)
        monkeypatch.setattr(tickets, 'render_data_url', explode)

        resp = self._book(client, event_id, 3)

        assert resp.status_code == 500
        assert resp.get_json()['message'] == 'renderer crashed'
        assert client.get(f'/api/events/{event_id}').get_json()['event']['attendees'] == 0
