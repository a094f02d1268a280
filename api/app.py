"""Flask REST API exposing the finance tracker session commands."""

from __future__ import annotations

from typing import Any, Dict, Optional

from flask import Flask, Response, jsonify, request
from flask_cors import CORS

from budget_core.config import Settings
from budget_core.exceptions import (
    CorruptSnapshotError,
    PersistenceError,
    SnapshotNotFoundError,
    TransactionIndexError,
    ValidationError,
)
from budget_core.logging_utils import configure_root_logger
from budget_core.models import Transaction
from budget_core.services import FinanceSession


def _transaction_payload(position: int, transaction: Transaction) -> Dict[str, Any]:
    return {"position": position, **transaction.to_dict()}


def create_app(settings: Optional[Settings] = None) -> Flask:
    settings = settings or Settings.from_env()
    configure_root_logger(settings.log_level)
    app = Flask(__name__)

    if settings.is_development:
        CORS(app, resources={r"/*": {"origins": "*"}}, supports_credentials=True)
    elif settings.allowed_origins:
        CORS(app, resources={r"/*": {"origins": list(settings.allowed_origins)}}, supports_credentials=True)
    else:
        CORS(app)

    session = FinanceSession(settings)
    try:
        session.load()
    except CorruptSnapshotError as exc:
        app.logger.error("Ignoring unreadable snapshot: %s", exc)
        try:
            session.set_aside_snapshot()
        except PersistenceError as backup_exc:
            app.logger.error("Unable to keep unreadable snapshot: %s", backup_exc)
    except PersistenceError as exc:
        app.logger.error("Unable to load snapshot: %s", exc)
    app.extensions["finance_session"] = session

    def _success(payload: Any, status: int = 200):
        if status == 204:
            return ("", status)
        return jsonify(payload), status

    def _handle_error(exc: Exception, status: int, message: str):
        app.logger.error("%s: %s", message, exc)
        return jsonify({"error": message, "details": str(exc)}), status

    @app.errorhandler(ValidationError)
    def handle_validation_error(exc: ValidationError):
        return _handle_error(exc, 400, "Validation error")

    @app.errorhandler(TransactionIndexError)
    def handle_bad_position(exc: TransactionIndexError):
        return _handle_error(exc, 404, "Transaction not found")

    @app.errorhandler(SnapshotNotFoundError)
    def handle_missing_snapshot(exc: SnapshotNotFoundError):
        return _handle_error(exc, 404, "Snapshot not found")

    @app.errorhandler(CorruptSnapshotError)
    def handle_corrupt_snapshot(exc: CorruptSnapshotError):
        return _handle_error(exc, 422, "Corrupt snapshot")

    @app.errorhandler(PersistenceError)
    def handle_persistence_error(exc: PersistenceError):
        return _handle_error(exc, 500, "Persistence error")

    def _json_body() -> Dict[str, Any]:
        if not request.is_json:
            raise ValidationError("Request content must be application/json")
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            raise ValidationError("Malformed JSON body")
        return data

    @app.get("/summary")
    def summary():
        return _success(session.summary().to_dict())

    @app.put("/budget")
    def set_budget():
        payload = _json_body()
        budget = session.set_budget(payload.get("amount"))
        return _success({"budget": f"{budget:.2f}"})

    @app.get("/transactions")
    def list_transactions():
        transactions = session.list_transactions()
        return _success({
            "items": [
                _transaction_payload(position, transaction)
                for position, transaction in enumerate(transactions, start=1)
            ],
        })

    @app.post("/transactions")
    def create_transaction():
        payload = _json_body()
        result = session.add_transaction(
            payload.get("kind"),
            payload.get("description"),
            payload.get("amount"),
            payload.get("category"),
        )
        body = _transaction_payload(len(session.list_transactions()), result.transaction)
        body["alert"] = result.alert.value if result.alert else None
        return _success(body, 201)

    @app.delete("/transactions/<int(signed=True):position>")
    def delete_transaction(position: int):
        session.delete_transaction(position)
        return _success({}, 204)

    @app.get("/categories/<kind>")
    def list_categories(kind: str):
        return _success({"items": list(session.list_categories(kind))})

    @app.post("/categories/<kind>")
    def create_category(kind: str):
        payload = _json_body()
        name = session.add_category(kind, payload.get("name"))
        return _success({"name": name}, 201)

    @app.post("/snapshot")
    def save_snapshot():
        path = session.save()
        return _success({"path": str(path)})

    @app.post("/snapshot/load")
    def load_snapshot():
        if not session.load():
            raise SnapshotNotFoundError(f"No snapshot found at {settings.snapshot_path}")
        return _success({"transactions": len(session.list_transactions())})

    @app.get("/export.csv")
    def export_csv():
        path = session.export_csv()
        return Response(
            path.read_text(encoding="utf-8"),
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename={path.name}"},
        )

    return app


if __name__ == "__main__":
    # One mutator at a time: the ledger is not shared across threads.
    create_app().run(threaded=False)
