from flask_sqlalchemy import SQLAlchemy
from flask_bcrypt import Bcrypt
from datetime import datetime

db = SQLAlchemy()
bcrypt = Bcrypt()


def _iso(value):
    return value.isoformat() if value else None


class User(db.Model):
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(120), nullable=False)
    email = db.Column(db.String(120), unique=True, nullable=False)
    password = db.Column(db.String(200), nullable=False)
    phone = db.Column(db.String(20))
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def to_public(self):
        return {"id": str(self.id) if self.id else None, "name": self.name, "email": self.email}


class Event(db.Model):
    id = db.Column(db.Integer, primary_key=True)
    event_id = db.Column(db.String(40), unique=True, nullable=False)
    title = db.Column(db.String(200), nullable=False)
    category = db.Column(db.String(50), nullable=False)
    description = db.Column(db.Text, nullable=False)
    date = db.Column(db.String(20), nullable=False)
    time = db.Column(db.String(20), nullable=False)
    location = db.Column(db.String(200), nullable=False)
    venue = db.Column(db.String(200))
    city = db.Column(db.String(100))
    state = db.Column(db.String(100))
    address = db.Column(db.String(300), default="")
    price = db.Column(db.Integer, default=0)
    max_attendees = db.Column(db.Integer, default=100)
    attendees = db.Column(db.Integer, default=0)
    image = db.Column(db.Text, default="")
    highlights = db.Column(db.JSON, default=list)
    what_to_expect = db.Column(db.Text, default="")
    contact_email = db.Column(db.String(120), nullable=False)
    contact_phone = db.Column(db.String(20), default="")
    created_by = db.Column(db.String(120), default="Anonymous")
    created_by_email = db.Column(db.String(120), default="")
    status = db.Column(db.String(20), default="active")
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime)

    # JSON key -> column attribute, for the fields a client may write
    EDITABLE = {
        "title": "title",
        "category": "category",
        "description": "description",
        "date": "date",
        "time": "time",
        "location": "location",
        "venue": "venue",
        "city": "city",
        "state": "state",
        "address": "address",
        "price": "price",
        "maxAttendees": "max_attendees",
        "attendees": "attendees",
        "image": "image",
        "highlights": "highlights",
        "whatToExpect": "what_to_expect",
        "contactEmail": "contact_email",
        "contactPhone": "contact_phone",
        "status": "status",
    }

    def to_dict(self):
        data = {key: getattr(self, attr) for key, attr in self.EDITABLE.items()}
        data.update({
            "eventId": self.event_id,
            "createdBy": self.created_by,
            "createdByEmail": self.created_by_email,
            "createdAt": _iso(self.created_at),
            "updatedAt": _iso(self.updated_at),
        })
        return data

    def summary(self):
        return {
            "eventId": self.event_id,
            "title": self.title,
            "category": self.category,
            "date": self.date,
            "time": self.time,
            "location": self.location,
            "price": self.price,
            "status": self.status,
        }


class Booking(db.Model):
    id = db.Column(db.Integer, primary_key=True)
    booking_id = db.Column(db.String(40), unique=True, nullable=False)
    event_id = db.Column(db.String(40), index=True)
    event_title = db.Column(db.String(200), nullable=False)
    event_date = db.Column(db.String(20))
    event_time = db.Column(db.String(20))
    event_location = db.Column(db.String(200))
    ticket_quantity = db.Column(db.Integer, nullable=False)
    price = db.Column(db.Float, nullable=False, default=0)
    total_amount = db.Column(db.Float, nullable=False)
    user_name = db.Column(db.String(120), nullable=False)
    user_email = db.Column(db.String(120), nullable=False, index=True)
    user_phone = db.Column(db.String(20), default="N/A")
    qr_code = db.Column(db.Text)
    booking_date = db.Column(db.DateTime, default=datetime.utcnow)
    status = db.Column(db.String(20), default="pending")
    payment_status = db.Column(db.String(20), default="pending")
    payment_method = db.Column(db.String(30))
    payment_id = db.Column(db.String(100))
    payment_token = db.Column(db.Text)
    payment_date = db.Column(db.DateTime)
    refund_date = db.Column(db.DateTime)
    refund_reason = db.Column(db.String(300))
    checked_in_at = db.Column(db.DateTime)

    def to_dict(self):
        return {
            "bookingId": self.booking_id,
            "eventId": self.event_id,
            "eventTitle": self.event_title,
            "eventDate": self.event_date,
            "eventTime": self.event_time,
            "eventLocation": self.event_location,
            "ticketQuantity": self.ticket_quantity,
            "quantity": self.ticket_quantity,
            "price": self.price,
            "totalAmount": self.total_amount,
            "userName": self.user_name,
            "userEmail": self.user_email,
            "userPhone": self.user_phone,
            "qrCode": self.qr_code,
            "status": self.status,
            "paymentStatus": self.payment_status,
            "paymentMethod": self.payment_method,
            "paymentId": self.payment_id,
            "bookingDate": _iso(self.booking_date),
            "paymentDate": _iso(self.payment_date),
            "refundDate": _iso(self.refund_date),
            "refundReason": self.refund_reason,
            "checkedInAt": _iso(self.checked_in_at),
        }

    def payment_summary(self):
        return {
            "bookingId": self.booking_id,
            "paymentStatus": self.payment_status,
            "paymentMethod": self.payment_method,
            "paymentId": self.payment_id,
            "amount": self.total_amount,
            "paymentDate": _iso(self.payment_date),
        }
