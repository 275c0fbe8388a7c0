from flask import Flask, request, jsonify, render_template
from flask_cors import CORS
from models import db, bcrypt, User, Event, Booking
from flask_jwt_extended import JWTManager, create_access_token, verify_jwt_in_request, get_jwt_identity
from flask_jwt_extended.exceptions import JWTExtendedException
from jwt.exceptions import PyJWTError
from sqlalchemy import func, or_
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.exceptions import HTTPException
from datetime import datetime, date, timedelta
import click
import logging
import math
import os

import lifecycle
import mailer
import payments
import storage
import tickets

app = Flask(__name__)
CORS(app, origins=os.environ.get('CORS_ORIGINS', '*'),
     methods=['GET', 'POST', 'PUT', 'PATCH', 'DELETE', 'OPTIONS'],
     allow_headers=['Content-Type', 'Authorization'])

# 🔐 Config
app.config['SQLALCHEMY_DATABASE_URI'] = os.environ.get('DATABASE_URL', 'sqlite:///data.db')
app.config['SQLALCHEMY_TRACK_MODIFICATIONS'] = False
app.config['SECRET_KEY'] = os.environ.get('SECRET_KEY', 'super-secret-key')
app.config['JWT_SECRET_KEY'] = os.environ.get('JWT_SECRET_KEY', 'eventease-dev-jwt-secret-change-me')
app.config['JWT_ACCESS_TOKEN_EXPIRES'] = timedelta(days=7)
app.config['MAIL_API_URL'] = os.environ.get('MAIL_API_URL', 'https://api.brevo.com/v3/smtp/email')
app.config['MAIL_API_KEY'] = os.environ.get('MAIL_API_KEY', '')
app.config['MAIL_SENDER'] = os.environ.get('MAIL_SENDER', 'tickets@eventease.com')
app.config['MAIL_SENDER_NAME'] = os.environ.get('MAIL_SENDER_NAME', 'EventEase')
app.config['RAZORPAY_KEY_SECRET'] = os.environ.get('RAZORPAY_KEY_SECRET', '')
app.config['ALLOW_DEMO_PAYMENTS'] = os.environ.get('ALLOW_DEMO_PAYMENTS', 'true').lower() == 'true'
app.config['VERIFY_BASE_URL'] = os.environ.get('VERIFY_BASE_URL', 'https://eventease.com')

EVENT_STATUSES = ('active', 'cancelled', 'completed', 'draft')

# column sizes of the Booking fields copied from the request
BOOKING_FIELD_LIMITS = {
    'eventId': 40,
    'eventTitle': 200,
    'eventDate': 20,
    'eventTime': 20,
    'eventLocation': 200,
    'userName': 120,
    'userEmail': 120,
    'userPhone': 20,
    'paymentId': 100,
}

# 🔧 Init
db.init_app(app)
bcrypt.init_app(app)
jwt = JWTManager(app)

logging.basicConfig(level=logging.INFO, format='%(asctime)s %(levelname)s %(name)s: %(message)s')
app.logger.setLevel(logging.INFO)


def error(text, status=400, **extra):
    body = {"success": False, "error": text}
    body.update(extra)
    return jsonify(body), status


def current_email():
    # the browser sends placeholder tokens when signed out, so a bad token means anonymous
    try:
        verify_jwt_in_request(optional=True)
    except (JWTExtendedException, PyJWTError):
        return None
    return get_jwt_identity()


def positive_int(value):
    number = float(value)
    if not math.isfinite(number) or number != int(number) or number < 1:
        raise ValueError(value)
    return int(number)


def amount(value):
    number = float(value)
    if not math.isfinite(number) or number < 0:
        raise ValueError(value)
    return round(number, 2)


def to_int(value, default):
    # form inputs arrive as strings such as "49.99"; whole rupees are kept
    try:
        return int(float(value))
    except (TypeError, ValueError, OverflowError):
        return default


def too_long(data):
    """Name the first booking field that would not fit its column, if any."""
    for field, limit in BOOKING_FIELD_LIMITS.items():
        value = data.get(field)
        if value is not None and len(str(value)) > limit:
            return field
    return None


def reserve_seats(event_id, quantity):
    """Take ``quantity`` seats on a tracked event in one conditional UPDATE.

    Returns ``(taken, refused)``: whether seats were counted against the event,
    and an error response when the booking may not go ahead.
    Bookings for events this server does not know about are not counted.
    """
    if not event_id:
        return False, None
    try:
        event = Event.query.filter_by(event_id=event_id).first()
        if event is None:
            return False, None
        if event.status != 'active':
            return False, error("Event is not open for booking", 409)

        updated = Event.query.filter(
            Event.event_id == event_id,
            Event.attendees + quantity <= Event.max_attendees
        ).update({Event.attendees: Event.attendees + quantity}, synchronize_session=False)
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        app.logger.warning("Could not update attendees for %s: %s", event_id, e)
        return False, None

    if not updated:
        return False, error("Not enough tickets available", 409)
    return True, None


def release_seats(event_id, quantity):
    if not event_id:
        return
    try:
        Event.query.filter(
            Event.event_id == event_id,
            Event.attendees >= quantity
        ).update({Event.attendees: Event.attendees - quantity}, synchronize_session=False)
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        app.logger.warning("Could not release seats for %s: %s", event_id, e)


def new_booking(data, quantity, price, total, payment_method=None):
    now = datetime.utcnow()
    booking = Booking(
        booking_id=tickets.generate_booking_id(),
        event_id=data.get('eventId'),
        event_title=data['eventTitle'],
        event_date=data.get('eventDate'),
        event_time=data.get('eventTime'),
        event_location=data.get('eventLocation'),
        ticket_quantity=quantity,
        price=price,
        total_amount=total,
        user_name=data['userName'],
        user_email=data['userEmail'],
        user_phone=data.get('userPhone') or 'N/A',
        booking_date=now,
        status='pending',
        payment_status='pending',
        payment_method=payment_method,
    )
    if payment_method:
        booking.payment_id = data.get('paymentId') or tickets.generate_transaction_id()
        booking.payment_token = data.get('paymentToken') or 'N/A'

    payload = tickets.build_payload(booking.to_dict(), app.config['VERIFY_BASE_URL'])
    booking.qr_code = tickets.render_data_url(payload)
    lifecycle.apply(booking, 'confirm_payment', now)
    return booking


def place_booking(data, quantity, price, total, payment_method=None):
    """Reserve seats, then build and store the booking.

    Returns ``(booking, refused)``. Seats taken here are given back if the
    booking cannot be completed.
    """
    field = too_long(data)
    if field:
        return None, error(f"{field} is too long")

    taken, refused = reserve_seats(data.get('eventId'), quantity)
    if refused:
        return None, refused

    try:
        booking = new_booking(data, quantity, price, total, payment_method=payment_method)
        storage.save_booking(booking)
    except tickets.QRCodeOverflow as e:
        if taken:
            release_seats(data.get('eventId'), quantity)
        app.logger.warning("Booking rejected: %s", e)
        return None, error('Booking details are too long to fit on a ticket')
    except Exception:
        db.session.rollback()
        if taken:
            release_seats(data.get('eventId'), quantity)
        raise
    return booking, None


@app.before_request
def log_request():
    app.logger.info("%s %s", request.method, request.path)


@app.errorhandler(HTTPException)
def handle_http_error(e):
    return error(e.description, e.code)


@app.errorhandler(Exception)
def handle_unexpected_error(e):
    app.logger.exception("Server error: %s", e)
    return error("Internal server error", 500, message=str(e))


@app.route('/')
def home():
    return jsonify({
        "message": "EventEase API Server with Payment",
        "version": "2.0.0",
        "endpoints": {
            "auth": "/api/auth/signup, /api/auth/signin",
            "bookings": "/api/bookings",
            "bookingWithPayment": "/api/bookings/with-payment",
            "verifyPayment": "/api/payments/verify",
            "paymentDetails": "/api/payments/:bookingId",
            "refund": "/api/payments/refund",
            "events": "/api/events",
            "ticketPdf": "/api/tickets/generate-pdf",
            "health": "/health"
        }
    })


@app.route('/health')
def health():
    return jsonify({
        "status": "OK",
        "message": "EventEase API with Payment Integration",
        "timestamp": datetime.utcnow().isoformat() + 'Z',
        "bookings": len(storage.memory_bookings),
        "features": ["booking", "payment", "qr-generation", "pdf-tickets", "email-confirmation"]
    })


# ✅ Signup
@app.route('/api/auth/signup', methods=['POST'])
def signup():
    data = request.get_json(silent=True) or {}
    name = data.get('name')
    email = data.get('email')
    password = data.get('password')

    if not name or not email or not password:
        return jsonify({'error': 'All fields are required'}), 400
    if len(password) < 6:
        return jsonify({'error': 'Password must be at least 6 characters'}), 400

    if storage.find_user(email):
        return jsonify({'error': 'Email already registered'}), 400

    hashed_password = bcrypt.generate_password_hash(password).decode('utf-8')
    user = User(name=name, email=email, password=hashed_password,
                phone=data.get('phone'), created_at=datetime.utcnow())
    storage.save_user(user)
    app.logger.info("User created: %s", email)

    token = create_access_token(identity=email, additional_claims={"name": name})
    return jsonify({
        'message': 'User created successfully',
        'token': token,
        'user': user.to_public()
    }), 201


# 🔐 Signin
@app.route('/api/auth/signin', methods=['POST'])
def signin():
    data = request.get_json(silent=True) or {}
    email = data.get('email')
    password = data.get('password')

    if not email or not password:
        return jsonify({'error': 'Email and password required'}), 400

    user = storage.find_user(email)
    if not user or not bcrypt.check_password_hash(user.password, password):
        return jsonify({'error': 'Invalid credentials'}), 401

    token = create_access_token(identity=user.email, additional_claims={"name": user.name})
    app.logger.info("User signed in: %s", email)
    return jsonify({'message': 'Login successful', 'token': token, 'user': user.to_public()})


# 🎫 Plain booking
@app.route('/api/bookings', methods=['POST'])
def create_booking():
    data = request.get_json(silent=True) or {}
    required = ('eventTitle', 'ticketQuantity', 'userName', 'userEmail')
    if any(not data.get(field) for field in required):
        return error('Missing required booking information')

    try:
        quantity = positive_int(data['ticketQuantity'])
        price = amount(data.get('price') or 0)
        total = amount(price * quantity)
    except (TypeError, ValueError, OverflowError):
        return error('Ticket quantity must be a positive integer and price a non-negative number')

    booking, refused = place_booking(data, quantity, price, total)
    if refused:
        return refused
    app.logger.info("Booking confirmed: %s", booking.booking_id)

    return jsonify({
        'success': True,
        'message': 'Booking confirmed successfully',
        'booking': booking.to_dict()
    }), 201


# 💳 Booking with payment
@app.route('/api/bookings/with-payment', methods=['POST'])
def create_booking_with_payment():
    data = request.get_json(silent=True) or {}
    required = ('eventTitle', 'ticketQuantity', 'userName', 'userEmail', 'totalAmount')
    if any(not data.get(field) for field in required):
        app.logger.info("Booking with payment rejected: missing required fields")
        return error('Missing required booking information')

    try:
        quantity = positive_int(data['ticketQuantity'])
        total = amount(data['totalAmount'])
        price = amount(data['price']) if data.get('price') not in (None, '') else round(total / quantity, 2)
    except (TypeError, ValueError, OverflowError):
        return error('Ticket quantity must be a positive integer and amounts non-negative numbers')

    if abs(price * quantity - total) > 0.01:
        return error('Total amount does not match price x quantity')

    try:
        method = payments.verify_payment(data, app.config)
    except payments.PaymentError as e:
        app.logger.warning("Payment verification failed: %s", e)
        return error('Payment verification failed', message=str(e))

    app.logger.info("Processing payment and generating booking for %s", data['userEmail'])
    booking, refused = place_booking(data, quantity, price, total, payment_method=method)
    if refused:
        return refused

    result = booking.to_dict()
    html = render_template('booking_confirmation.html', booking=result)
    mailer.send_async(app.config, booking.user_email, booking.user_name,
                      f"Payment Successful - {booking.event_title}", html)

    app.logger.info("Booking with payment completed: %s", booking.booking_id)
    return jsonify({
        'success': True,
        'message': 'Payment successful! Booking confirmed.',
        'booking': result
    }), 201


# 📄 List bookings
@app.route('/api/bookings', methods=['GET'])
@app.route('/api/bookings/my-bookings', methods=['GET'])
def list_bookings():
    email = current_email() or request.args.get('email')
    bookings = storage.list_bookings(user_email=email)
    return jsonify({
        'success': True,
        'count': len(bookings),
        'bookings': [b.to_dict() for b in bookings]
    })


@app.route('/api/bookings/<booking_id>', methods=['GET'])
def get_booking(booking_id):
    booking = storage.find_booking(booking_id)
    if not booking:
        return error('Booking not found', 404)
    return jsonify({'success': True, 'booking': booking.to_dict()})


# 🚪 Venue entry
@app.route('/api/bookings/<booking_id>/check-in', methods=['POST'])
def check_in(booking_id):
    data = request.get_json(silent=True) or {}
    booking = storage.find_booking(booking_id)
    if not booking:
        return error('Booking not found', 404)

    if data.get('qrPayload'):
        try:
            scanned = tickets.decode_payload(data['qrPayload'])
        except ValueError:
            return error('Invalid QR code')
        if scanned['bookingId'] != booking.booking_id:
            return error('QR code does not match booking')

    try:
        lifecycle.apply(booking, 'check_in')
    except lifecycle.InvalidTransition as e:
        return error(e.message)
    storage.commit(booking)

    return jsonify({
        'success': True,
        'message': 'Ticket validated successfully',
        'booking': booking.to_dict()
    })


# 🔍 Verify payment
@app.route('/api/payments/verify', methods=['POST'])
def verify_payment():
    data = request.get_json(silent=True) or {}
    booking_id = data.get('bookingId')
    payment_id = data.get('paymentId')
    if not booking_id:
        return error('Booking id is required')

    app.logger.info("Verifying payment %s for %s", payment_id, booking_id)
    booking = storage.find_booking(booking_id)
    if not booking:
        return error('Booking not found', 404)

    if payment_id and booking.payment_id and payment_id != booking.payment_id:
        return error('Payment verification failed', verified=False)

    action = 'fail_payment' if data.get('status') == 'failed' else 'confirm_payment'
    try:
        lifecycle.apply(booking, action)
    except lifecycle.InvalidTransition as e:
        return error(e.message, verified=False)
    if payment_id and not booking.payment_id:
        booking.payment_id = payment_id
    storage.commit(booking)

    if action == 'fail_payment':
        return jsonify({
            'success': True,
            'message': 'Payment marked as failed',
            'verified': False,
            'payment': booking.payment_summary()
        })
    return jsonify({
        'success': True,
        'message': 'Payment verified successfully',
        'verified': True,
        'payment': booking.payment_summary()
    })


@app.route('/api/payments/<booking_id>', methods=['GET'])
def payment_details(booking_id):
    booking = storage.find_booking(booking_id)
    if not booking:
        return error('Booking not found', 404)
    return jsonify({'success': True, 'payment': booking.payment_summary()})


# 💰 Refund
@app.route('/api/payments/refund', methods=['POST'])
def refund_payment():
    data = request.get_json(silent=True) or {}
    booking_id = data.get('bookingId')
    app.logger.info("Processing refund for %s", booking_id)

    booking = storage.find_booking(booking_id) if booking_id else None
    if not booking:
        return error('Booking not found', 404)

    try:
        lifecycle.apply(booking, 'refund')
    except lifecycle.InvalidTransition as e:
        return error(e.message)
    booking.refund_reason = data.get('reason')
    storage.commit(booking)
    release_seats(booking.event_id, booking.ticket_quantity)

    return jsonify({
        'success': True,
        'message': 'Refund processed successfully',
        'refundAmount': booking.total_amount
    })


# 🔳 QR code for an existing ticket
@app.route('/api/qrcode/generate', methods=['POST'])
def generate_qrcode():
    data = request.get_json(silent=True) or {}
    if not data.get('bookingId'):
        return error('Booking id is required')

    ticket = dict(data)
    ticket.setdefault('ticketQuantity', data.get('quantity'))
    payload = tickets.build_payload(ticket, app.config['VERIFY_BASE_URL'])
    try:
        qr_code = tickets.render_data_url(payload)
    except tickets.QRCodeOverflow as e:
        return error(str(e))
    return jsonify({'success': True, 'qrCode': qr_code, 'payload': payload})


# 🧾 Printable PDF ticket
@app.route('/api/tickets/generate-pdf', methods=['POST'])
def generate_ticket_pdf():
    data = request.get_json(silent=True) or {}
    booking_id = data.get('bookingId')
    if not booking_id:
        return error('Booking id is required')

    ticket = data.get('bookingData')
    if ticket and not isinstance(ticket, dict):
        return error('Booking data must be an object')
    if not ticket:
        booking = storage.find_booking(booking_id)
        if not booking:
            return error('Booking not found', 404)
        ticket = booking.to_dict()
    ticket = dict(ticket, bookingId=booking_id)

    payload = tickets.build_payload(ticket, app.config['VERIFY_BASE_URL'])
    try:
        pdf = tickets.render_pdf_data_url(ticket, payload)
    except tickets.QRCodeOverflow as e:
        return error(str(e))

    app.logger.info("PDF ticket generated: %s", booking_id)
    return jsonify({'success': True, 'pdf': pdf, 'filename': f"EventEase-Ticket-{booking_id}.pdf"})


# 🆕 Create Event
@app.route('/api/events', methods=['POST'])
@app.route('/api/events/create', methods=['POST'])
def create_event():
    data = request.get_json(silent=True) or {}
    required = ('title', 'category', 'description', 'date', 'time', 'location', 'contactEmail')
    if any(not data.get(field) for field in required):
        return error('Missing required fields')

    app.logger.info("Creating new event: %s", data['title'])
    event = Event(
        event_id=tickets.generate_event_id(),
        title=data['title'],
        category=data['category'],
        description=data['description'],
        date=data['date'],
        time=data['time'],
        location=data['location'],
        venue=data.get('venue'),
        city=data.get('city'),
        state=data.get('state'),
        address=data.get('address') or '',
        price=to_int(data.get('price'), 0),
        max_attendees=to_int(data.get('maxAttendees'), 100),
        attendees=to_int(data.get('attendees'), 0),
        image=data.get('image') or '',
        highlights=data.get('highlights') or [],
        what_to_expect=data.get('whatToExpect') or '',
        contact_email=data['contactEmail'],
        contact_phone=data.get('contactPhone') or '',
        created_by=data.get('createdBy') or 'Anonymous',
        created_by_email=data.get('createdByEmail') or current_email() or '',
        status='active',
        created_at=datetime.utcnow()
    )
    db.session.add(event)
    db.session.commit()

    html = render_template('event_created.html', event=event.to_dict())
    mailer.send_async(app.config, event.contact_email, event.created_by,
                      f'Your Event "{event.title}" is Now Live!', html)

    app.logger.info("Event created successfully: %s", event.event_id)
    return jsonify({
        'success': True,
        'message': 'Event created successfully',
        'event': event.summary()
    }), 201


# 📅 Get Events
@app.route('/api/events', methods=['GET'])
def get_events():
    status = request.args.get('status', 'active')
    category = request.args.get('category')
    search = request.args.get('search')

    query = Event.query.filter_by(status=status)
    if category:
        query = query.filter_by(category=category)
    if search:
        pattern = f"%{search}%"
        query = query.filter(or_(Event.title.ilike(pattern),
                                 Event.description.ilike(pattern),
                                 Event.location.ilike(pattern)))

    events = query.order_by(Event.created_at.desc()).all()
    return jsonify({'success': True, 'count': len(events), 'events': [e.to_dict() for e in events]})


@app.route('/api/events/search', methods=['GET'])
def search_events():
    q = request.args.get('q')
    category = request.args.get('category')
    city = request.args.get('city')
    min_price = request.args.get('minPrice')
    max_price = request.args.get('maxPrice')

    query = Event.query.filter_by(status='active')
    if q:
        pattern = f"%{q}%"
        query = query.filter(or_(Event.title.ilike(pattern),
                                 Event.description.ilike(pattern),
                                 Event.location.ilike(pattern)))
    if category:
        query = query.filter_by(category=category)
    if city:
        query = query.filter(Event.city.ilike(f"%{city}%"))
    try:
        if min_price is not None:
            query = query.filter(Event.price >= int(min_price))
        if max_price is not None:
            query = query.filter(Event.price <= int(max_price))
    except ValueError:
        return error('Price filters must be whole numbers')

    events = query.order_by(Event.created_at.desc()).all()
    return jsonify({
        'success': True,
        'count': len(events),
        'query': {'q': q, 'category': category, 'minPrice': min_price, 'maxPrice': max_price, 'city': city},
        'events': [e.to_dict() for e in events]
    })


@app.route('/api/events/featured', methods=['GET'])
def featured_events():
    events = (Event.query.filter_by(status='active')
              .order_by(Event.attendees.desc(), Event.created_at.desc())
              .limit(6).all())
    return jsonify({'success': True, 'count': len(events), 'events': [e.to_dict() for e in events]})


@app.route('/api/events/upcoming', methods=['GET'])
def upcoming_events():
    # dates are stored as YYYY-MM-DD so string order is date order
    today = date.today().isoformat()
    events = (Event.query.filter(Event.status == 'active', Event.date >= today)
              .order_by(Event.date.asc())
              .limit(10).all())
    return jsonify({'success': True, 'count': len(events), 'events': [e.to_dict() for e in events]})


# 📊 Category counts
@app.route('/api/events/categories/counts', methods=['GET'])
def category_counts():
    rows = (db.session.query(Event.category, func.count(Event.id))
            .filter(Event.status == 'active')
            .group_by(Event.category).all())
    return jsonify({'success': True, 'categories': {category: count for category, count in rows}})


@app.route('/api/events/my-events/<email>', methods=['GET'])
def my_events(email):
    events = Event.query.filter_by(created_by_email=email).order_by(Event.created_at.desc()).all()
    return jsonify({'success': True, 'count': len(events), 'events': [e.to_dict() for e in events]})


@app.route('/api/events/<event_id>', methods=['GET'])
def get_event(event_id):
    event = Event.query.filter_by(event_id=event_id).first()
    if not event:
        return error('Event not found', 404)
    return jsonify({'success': True, 'event': event.to_dict()})


# ✏️ Update Event
@app.route('/api/events/<event_id>', methods=['PUT'])
def update_event(event_id):
    data = request.get_json(silent=True) or {}
    event = Event.query.filter_by(event_id=event_id).first()
    if not event:
        return error('Event not found', 404)

    if 'status' in data and data['status'] not in EVENT_STATUSES:
        return error('Invalid status')

    for key, attr in Event.EDITABLE.items():
        if key not in data:
            continue
        value = data[key]
        if key in ('price', 'maxAttendees', 'attendees'):
            value = to_int(value, getattr(event, attr))
        setattr(event, attr, value)
    event.updated_at = datetime.utcnow()
    db.session.commit()

    app.logger.info("Event updated: %s", event_id)
    return jsonify({'success': True, 'message': 'Event updated successfully', 'event': event.to_dict()})


@app.route('/api/events/<event_id>/status', methods=['PATCH'])
def update_event_status(event_id):
    data = request.get_json(silent=True) or {}
    status = data.get('status')
    if status not in EVENT_STATUSES:
        return error('Invalid status')

    event = Event.query.filter_by(event_id=event_id).first()
    if not event:
        return error('Event not found', 404)

    event.status = status
    event.updated_at = datetime.utcnow()
    db.session.commit()
    app.logger.info("Event %s status set to %s", event_id, status)
    return jsonify({'success': True, 'message': 'Event status updated successfully', 'event': event.to_dict()})


# 🗑️ Delete Event
@app.route('/api/events/<event_id>', methods=['DELETE'])
def delete_event(event_id):
    event = Event.query.filter_by(event_id=event_id).first()
    if not event:
        return error('Event not found', 404)

    db.session.delete(event)
    db.session.commit()
    app.logger.info("Event deleted: %s", event_id)
    return jsonify({'success': True, 'message': 'Event deleted successfully'})


@app.route('/api/events/<event_id>/bookings', methods=['GET'])
def event_bookings(event_id):
    bookings = storage.list_bookings(event_id=event_id)
    return jsonify({
        'success': True,
        'count': len(bookings),
        'statistics': {
            'totalBookings': len(bookings),
            'confirmedBookings': sum(1 for b in bookings if b.status == 'confirmed'),
            'totalRevenue': sum(b.total_amount or 0 for b in bookings),
            'totalTickets': sum(b.ticket_quantity or 0 for b in bookings)
        },
        'bookings': [b.to_dict() for b in bookings]
    })


# 🧱 flask --app app init-db [--drop]
@app.cli.command('init-db')
@click.option('--drop', is_flag=True, help='Drop existing tables first.')
def init_db(drop):
    if drop:
        db.drop_all()
    db.create_all()
    click.echo("Database initialized with tables: " + ", ".join(sorted(db.metadata.tables)))


# ▶️ Run app
if __name__ == '__main__':
    with app.app_context():
        db.create_all()
    app.run(debug=True, port=int(os.environ.get('PORT', 5000)))
