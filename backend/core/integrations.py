"""
Clients for the third-party services configured in settings:
Slack (connection test, notifications) and the payment gateways.
"""
import logging
from typing import Dict, Any

import requests

from .models import SlackSettings, PaymentGatewaySettings
from .utils import get_agency_setting

logger = logging.getLogger(__name__)

SLACK_API_URL = 'https://slack.com/api'
STRIPE_BALANCE_URL = 'https://api.stripe.com/v1/balance'
RAZORPAY_PAYMENTS_URL = 'https://api.razorpay.com/v1/payments'


def _timeout():
    return get_agency_setting('EXTERNAL_API_TIMEOUT', 10)


def check_slack_connection(bot_token: str) -> Dict[str, Any]:
    """Call Slack's auth.test with the bot token"""
    if not bot_token:
        return {'success': False, 'team': None, 'message': 'Slack bot token is not configured'}
    try:
        response = requests.post(
            f'{SLACK_API_URL}/auth.test',
            headers={'Authorization': f'Bearer {bot_token}'},
            timeout=_timeout(),
        )
        payload = response.json()
    except requests.exceptions.RequestException as e:
        logger.warning(f"Slack connection test failed: {str(e)}")
        return {'success': False, 'team': None, 'message': f'Could not reach Slack: {str(e)}'}
    except ValueError:
        return {'success': False, 'team': None, 'message': 'Slack returned an invalid response'}

    if payload.get('ok'):
        return {'success': True, 'team': payload.get('team'), 'message': f"Connected to {payload.get('team')}"}
    return {'success': False, 'team': None, 'message': f"Slack error: {payload.get('error', 'unknown_error')}"}


def post_slack_message(text: str, flag: str = None) -> bool:
    """
    Post a message to the default Slack channel if notifications are enabled.
    When `flag` names a SlackSettings toggle (e.g. notify_on_payment) it must be on too.
    Never raises: a failed notification must not fail the caller.
    """
    slack = SlackSettings.objects.first()
    if not slack or not slack.is_enabled or not slack.bot_token or not slack.default_channel_id:
        return False
    if flag and not getattr(slack, flag):
        return False
    try:
        response = requests.post(
            f'{SLACK_API_URL}/chat.postMessage',
            headers={'Authorization': f'Bearer {slack.bot_token}'},
            json={'channel': slack.default_channel_id, 'text': text},
            timeout=_timeout(),
        )
        ok = bool(response.json().get('ok'))
        if not ok:
            logger.warning(f"Slack notification rejected: {response.text[:200]}")
        return ok
    except (requests.exceptions.RequestException, ValueError) as e:
        logger.warning(f"Slack notification failed: {str(e)}")
        return False


def check_payment_gateway(gateway: PaymentGatewaySettings, provider: str = None) -> Dict[str, Any]:
    """Make an authenticated read-only call against the selected provider"""
    provider = (provider or gateway.active_provider or '').upper()
    if provider == 'STRIPE':
        if not gateway.stripe_secret_key:
            return {'success': False, 'message': 'Stripe secret key is not configured'}
        url = STRIPE_BALANCE_URL
        auth = (gateway.stripe_secret_key, '')
        params = None
    elif provider == 'RAZORPAY':
        if not gateway.razorpay_key_id or not gateway.razorpay_key_secret:
            return {'success': False, 'message': 'Razorpay key id and secret are required'}
        url = RAZORPAY_PAYMENTS_URL
        auth = (gateway.razorpay_key_id, gateway.razorpay_key_secret)
        params = {'count': 1}
    else:
        return {'success': False, 'message': 'Select a payment provider (STRIPE or RAZORPAY)'}

    try:
        response = requests.get(url, auth=auth, params=params, timeout=_timeout())
    except requests.exceptions.RequestException as e:
        logger.warning(f"{provider} connection test failed: {str(e)}")
        return {'success': False, 'message': f'Could not reach {provider.title()}: {str(e)}'}

    if response.status_code == 200:
        return {'success': True, 'message': f'{provider.title()} credentials are valid'}
    if response.status_code in (401, 403):
        return {'success': False, 'message': f'{provider.title()} rejected the credentials'}
    return {'success': False, 'message': f'{provider.title()} returned HTTP {response.status_code}'}
