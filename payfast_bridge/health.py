from flask import Blueprint, current_app, jsonify

health_bp = Blueprint("health", __name__)


@health_bp.route("/", methods=["GET"])
def health():
    store = current_app.extensions["record_store"]
    return jsonify({
        "status": "OK",
        "message": f"{current_app.config.get('APP_NAME', 'PayFast Backend API')} is running",
        "database": store.describe()["backend"],
        "endpoints": {
            "notify": "/api/payfastNotify",
            "success": "/api/payfastSuccess",
            "failure": "/api/payfastFailure",
        },
    })
