import hmac
import hashlib

SUPPORTED_METHODS = ('google_pay', 'razorpay', 'demo')


class PaymentError(Exception):
    pass


def _verify_google_pay(data, config):
    if not data.get('paymentToken'):
        raise PaymentError('Google Pay token missing')


def _verify_razorpay(data, config):
    payment_id = data.get('paymentId')
    if not payment_id:
        raise PaymentError('Razorpay payment id missing')

    secret = config.get('RAZORPAY_KEY_SECRET')
    order_id = data.get('razorpayOrderId')
    if not secret or not order_id:
        return

    signature = data.get('paymentToken') or ''
    expected = hmac.new(
        secret.encode('utf-8'),
        f"{order_id}|{payment_id}".encode('utf-8'),
        hashlib.sha256
    ).hexdigest()
    if not hmac.compare_digest(signature, expected):
        raise PaymentError('Invalid Razorpay signature')


def _verify_demo(data, config):
    if not config.get('ALLOW_DEMO_PAYMENTS', True):
        raise PaymentError('Demo payments are disabled')


VERIFIERS = {
    'google_pay': _verify_google_pay,
    'razorpay': _verify_razorpay,
    'demo': _verify_demo,
}


def verify_payment(data, config):
    """Check the provider result the client sent along with the order.

    Raises PaymentError if the provider is unknown or its data does not check out.
    """
    method = data.get('paymentMethod')
    verifier = VERIFIERS.get(method)
    if verifier is None:
        raise PaymentError(f"Unsupported payment method: {method or 'none'}")
    verifier(data, config)
    return method
