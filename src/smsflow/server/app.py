"""HTTP front door for SMS-forwarding clients."""
from datetime import datetime, timezone

from flask import Flask, jsonify, request
from flask_cors import CORS

from ..orchestrator.processor import IngestionOrchestrator
from ..store.base import TabularStore
from ..transactions.models import DEFAULT_SENDER, IncomingMessage
from ..utils.exceptions import PersistenceError, StoreError
from ..utils.logger import get_logger

logger = get_logger()

POLICY_REPORT = "report"
POLICY_ACKNOWLEDGE = "acknowledge"


def validate_sms_input(sms) -> bool:
    return isinstance(sms, str) and len(sms) > 0


def create_app(
    orchestrator: IngestionOrchestrator,
    store: TabularStore,
    persist_failure_policy: str = POLICY_REPORT
) -> Flask:
    """
    Build the Flask application.

    Args:
        orchestrator: Pipeline that handles POST /sms
        store: Store exposed through PUT /sms/transactions
        persist_failure_policy: "report" returns an error body when processing
            fails; "acknowledge" still answers "ok" and only logs the failure

    Returns:
        Configured Flask app
    """
    app = Flask("smsflow")
    CORS(app)

    @app.get("/health")
    def health():
        return jsonify({"status": "ok", "message": "Server is running"})

    @app.get("/sms")
    def hello():
        return jsonify({
            "message": "Hello World! SMS API is working!",
            "timestamp": datetime.now(timezone.utc).isoformat(),
        })

    @app.post("/sms")
    def receive_sms():
        body = request.get_json(silent=True) or {}
        if not isinstance(body, dict):
            body = {}
        sms = body.get("sms")

        if not validate_sms_input(sms):
            logger.warning(f"Validation error: field=sms type={type(sms).__name__}")
            return jsonify({"status": "error", "received_sms": "Invalid SMS content provided"}), 400

        sender = body.get("from")
        message = IncomingMessage(
            sms=sms,
            sender=sender if isinstance(sender, str) and sender else DEFAULT_SENDER,
            when=body.get("when")
        )

        try:
            result = orchestrator.process(message)
        except PersistenceError as e:
            logger.exception(f"POST /sms failed to persist transaction: {e}")
            return _failure_response(sms, persist_failure_policy)
        except Exception as e:
            logger.exception(f"POST /sms request error: {e}")
            return _failure_response(sms, persist_failure_policy)

        response = {"status": "ok", "received_sms": sms}
        if result.sms_id:
            response["sms_id"] = result.sms_id
        return jsonify(response)

    @app.put("/sms/transactions")
    def update_transactions():
        body = request.get_json(silent=True) or {}
        where = body.get("where") if isinstance(body, dict) else None
        new_values = body.get("newValues") if isinstance(body, dict) else None

        if not isinstance(where, dict) or not where or not isinstance(new_values, dict) or not new_values:
            logger.warning("Validation error: update requires non-empty 'where' and 'newValues'")
            return jsonify({"status": "error", "message": "'where' and 'newValues' must be non-empty objects"}), 400

        try:
            result = store.update(where=where, new_values=new_values)
        except StoreError as e:
            logger.error(f"PUT /sms/transactions failed: {e}")
            return jsonify({"status": "error", "message": "Store update failed"}), 502

        return jsonify({"status": "ok", "result": result})

    return app


def _failure_response(sms: str, policy: str):
    if policy == POLICY_ACKNOWLEDGE:
        return jsonify({"status": "ok", "received_sms": sms})
    return jsonify({"status": "error", "received_sms": "Internal server error"}), 500
