import base64
import io
import json
import time
import uuid
from datetime import datetime

import qrcode
from PIL import Image, ImageDraw
from qrcode.constants import ERROR_CORRECT_H
from qrcode.exceptions import DataOverflowError

TICKET_TYPE = 'EventEase_Ticket'
QR_DARK = '#7c3aed'
QR_LIGHT = '#ffffff'
PDF_PAGE = (800, 1000)


def _unique_id(prefix, separator=''):
    # millisecond clock plus a uuid4 slice, backed by the unique column
    suffix = uuid.uuid4().hex[:12].upper()
    return f"{prefix}{separator}{int(time.time() * 1000)}{suffix}"


def generate_booking_id():
    return _unique_id('BK')


def generate_transaction_id():
    return _unique_id('TXN')


def generate_event_id():
    return _unique_id('EVENT', '-')


def build_payload(booking, verify_base_url):
    """Serialize the data printed on a ticket's QR code."""
    return json.dumps({
        'type': TICKET_TYPE,
        'bookingId': booking['bookingId'],
        'eventTitle': booking.get('eventTitle'),
        'eventDate': booking.get('eventDate'),
        'eventTime': booking.get('eventTime'),
        'eventLocation': booking.get('eventLocation'),
        'userName': booking.get('userName'),
        'ticketQuantity': booking.get('ticketQuantity'),
        'totalAmount': booking.get('totalAmount'),
        'timestamp': datetime.utcnow().isoformat() + 'Z',
        'verificationUrl': f"{verify_base_url.rstrip('/')}/verify/{booking['bookingId']}",
    }, ensure_ascii=False)


def decode_payload(payload):
    data = json.loads(payload)
    if data.get('type') != TICKET_TYPE or not data.get('bookingId'):
        raise ValueError('Not an EventEase ticket')
    return data


class QRCodeOverflow(ValueError):
    pass


def _qr_image(payload):
    qr = qrcode.QRCode(error_correction=ERROR_CORRECT_H, border=1)
    qr.add_data(payload)
    try:
        qr.make(fit=True)
    except (DataOverflowError, ValueError) as e:
        raise QRCodeOverflow(f"Ticket data too long for a QR code ({len(payload.encode('utf-8'))} bytes)") from e
    return qr.make_image(fill_color=QR_DARK, back_color=QR_LIGHT)


def _data_url(image, fmt, mimetype):
    buffer = io.BytesIO()
    image.save(buffer, format=fmt)
    encoded = base64.b64encode(buffer.getvalue()).decode('ascii')
    return f"data:{mimetype};base64,{encoded}"


def render_data_url(payload):
    """Render ``payload`` as a PNG QR code data URL.

    Raises QRCodeOverflow when the payload does not fit the largest QR version.
    """
    return _data_url(_qr_image(payload), 'PNG', 'image/png')


def _printable(value):
    # the built-in font only covers latin-1
    return str(value if value not in (None, '') else 'N/A').encode('latin-1', 'replace').decode('latin-1')


def render_pdf_data_url(ticket, payload):
    """Lay out a one-page ticket with its details and QR code as a PDF data URL."""
    page = Image.new('RGB', PDF_PAGE, QR_LIGHT)
    draw = ImageDraw.Draw(page)

    draw.rectangle((0, 0, PDF_PAGE[0], 110), fill=QR_DARK)
    draw.text((60, 45), 'EventEase Ticket', fill=QR_LIGHT)

    lines = [
        ('Event', ticket.get('eventTitle')),
        ('Date', ticket.get('eventDate')),
        ('Time', ticket.get('eventTime')),
        ('Location', ticket.get('eventLocation')),
        ('Name', ticket.get('userName')),
        ('Tickets', ticket.get('ticketQuantity')),
        ('Total', ticket.get('totalAmount')),
        ('Booking ID', ticket.get('bookingId')),
    ]
    y = 150
    for label, value in lines:
        draw.text((60, y), f"{label}: {_printable(value)}", fill='#111827')
        y += 32

    qr = _qr_image(payload).get_image().convert('RGB').resize((360, 360))
    page.paste(qr, ((PDF_PAGE[0] - 360) // 2, y + 30))
    draw.text((60, PDF_PAGE[1] - 60), 'Show this QR code at the venue entrance.', fill='#6b7280')

    return _data_url(page, 'PDF', 'application/pdf')
