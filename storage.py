"""Persistence for bookings and users with an in-process fallback.

When the database rejects a write the record is kept in a module-level list
for the life of the process. Reads look in the database first, then there.
"""
from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from models import db, Booking, User

memory_bookings = []
memory_users = []


def _save(obj, fallback):
    db.session.add(obj)
    try:
        db.session.commit()
        return True
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.warning("Database write failed, using in-memory storage: %s", e)
        fallback.append(obj)
        return False


def save_booking(booking):
    return _save(booking, memory_bookings)


def save_user(user):
    return _save(user, memory_users)


def commit(obj):
    """Flush changes made to ``obj``; in-memory records need nothing."""
    if obj in memory_bookings or obj in memory_users:
        return
    db.session.commit()


def find_booking(booking_id):
    try:
        booking = Booking.query.filter_by(booking_id=booking_id).first()
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.warning("Booking lookup failed, checking memory: %s", e)
        booking = None
    if booking is None:
        booking = next((b for b in memory_bookings if b.booking_id == booking_id), None)
    return booking


def find_user(email):
    try:
        user = User.query.filter_by(email=email).first()
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.warning("User lookup failed, checking memory: %s", e)
        user = None
    if user is None:
        user = next((u for u in memory_users if u.email == email), None)
    return user


def list_bookings(user_email=None, event_id=None):
    try:
        query = Booking.query
        if user_email:
            query = query.filter_by(user_email=user_email)
        if event_id:
            query = query.filter_by(event_id=event_id)
        bookings = query.all()
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.warning("Booking listing failed, using memory only: %s", e)
        bookings = []

    for b in memory_bookings:
        if user_email and b.user_email != user_email:
            continue
        if event_id and b.event_id != event_id:
            continue
        bookings.append(b)

    return sorted(bookings, key=lambda b: b.booking_date, reverse=True)
