import logging
from datetime import datetime, timezone

from flask import Blueprint, current_app, jsonify, redirect, request

from ..challans import NOT_FOUND, PRIMARY, is_success_code, parse_record_key
from ..errors import InvalidSignatureError, RecordNotFoundError
from ..notifications import Notification, compute_validation_hash, resolve_field, verify
from ..redirects import build_failure_link, build_success_link
from ..storage.realtime import email_to_path

logger = logging.getLogger(__name__)

bp = Blueprint("payfast", __name__, url_prefix="/api")


def _notification_data():
    """Form-encoded and JSON bodies are both accepted."""
    if request.form:
        return request.form.to_dict()
    return request.get_json(silent=True) or {}


def _verify_notification(notification):
    config = current_app.config
    secured_key = config.get("PAYFAST_SECURED_KEY")
    merchant_id = config.get("PAYFAST_MERCHANT_ID")

    if verify(notification.basket_id, notification.err_code, secured_key, merchant_id,
              notification.validation_hash):
        logger.info("Hash validation successful", extra={"basket_id": notification.basket_id})
        return

    calculated = compute_validation_hash(notification.basket_id, notification.err_code,
                                         secured_key, merchant_id)
    raise InvalidSignatureError(
        "Invalid signature",
        payload={"calculated": calculated, "received": notification.validation_hash},
    )


@bp.route("/payfastNotify", methods=["POST"])
def payfast_notify():
    logger.info(
        "PayFast notify webhook",
        extra={
            "received_at": datetime.now(timezone.utc).isoformat(),
            "headers": dict(request.headers),
            "body": request.get_data(as_text=True),
        },
    )

    notification = Notification.from_mapping(_notification_data())
    logger.info("Extracted notification", extra={"notification": notification.to_log_dict()})
    notification.require()

    _verify_notification(notification)

    if not is_success_code(notification.err_code):
        logger.info("Payment failed with error code", extra={"err_code": notification.err_code})
        return jsonify({
            "success": False,
            "message": "Payment failed",
            "errorCode": notification.err_code,
        }), 200

    challan_number = parse_record_key(notification.basket_id)
    logger.info("Extracted challan number",
                extra={"basket_id": notification.basket_id, "challan_number": challan_number})

    outcome = current_app.extensions["reconciler"].reconcile(
        challan_number,
        notification.err_code,
        transaction_id=notification.transaction_id,
        contact_address=notification.email_address,
        basket_id=notification.basket_id,
    )

    if outcome.status == NOT_FOUND:
        raise RecordNotFoundError(
            "Challan not found in any email path",
            payload={
                "challanNumber": challan_number,
                "emailPath": email_to_path(notification.email_address),
                "basketId": notification.basket_id,
            },
        )

    if outcome.found_via == PRIMARY:
        message = "Payment processed successfully"
    else:
        message = "Payment processed and challan updated"

    return jsonify({
        "success": True,
        "message": message,
        "challanNumber": challan_number,
        "transactionId": notification.transaction_id,
    }), 200


@bp.route("/payfastSuccess", methods=["GET"])
def payfast_success():
    logger.info("PayFast success redirect", extra={"query": request.args.to_dict()})

    deep_link = build_success_link(
        basket_id=resolve_field(request.args, "basket_id", ""),
        transaction_id=resolve_field(request.args, "transaction_id", ""),
        scheme=current_app.config.get("DEEP_LINK_SCHEME", "echallan"),
    )
    logger.info("Redirecting to deep link", extra={"deep_link": deep_link})
    return redirect(deep_link)


@bp.route("/payfastFailure", methods=["GET"])
def payfast_failure():
    logger.info("PayFast failure redirect", extra={"query": request.args.to_dict()})

    deep_link = build_failure_link(
        basket_id=resolve_field(request.args, "basket_id", ""),
        err_code=resolve_field(request.args, "err_code"),
        err_msg=resolve_field(request.args, "err_msg"),
        scheme=current_app.config.get("DEEP_LINK_SCHEME", "echallan"),
    )
    logger.info("Redirecting to deep link", extra={"deep_link": deep_link})
    return redirect(deep_link)
