import logging
import re

from flask import Flask, Response, current_app, jsonify, request

from models import parse_receipt
from scoring import calculate_points
from store import NOT_FOUND_MESSAGE, ReceiptNotFound, ReceiptStore
from validation import InvalidReceipt, validate

logger = logging.getLogger(__name__)

RECEIPT_ID_PATH_PATTERN = re.compile(r"/receipts/([a-f0-9\-]+)/points")
STORE_EXTENSION_KEY = "receipt_store"
HOST = "0.0.0.0"
PORT = 8080


def extract_receipt_id(path: str) -> str:
    """ Pulls the receipt id out of a points lookup path, or returns "" when there is none """
    match = RECEIPT_ID_PATH_PATTERN.search(path)
    if match is None:
        return ""
    return match.group(1)


def get_store() -> ReceiptStore:
    return current_app.extensions[STORE_EXTENSION_KEY]


def process_receipt():
    """
    Router for receipt processing requests. The request body is decoded and
    validated, its points are calculated, and the receipt is stored together
    with its points under a freshly generated id, which is returned to the user.

    Returns:
        400 Error if the body is not a valid receipt
        200 OK and generated receipt id if the receipt is valid
    """
    try:
        receipt = parse_receipt(request.get_data())
        validate(receipt)
    except InvalidReceipt as e:
        logger.info("Rejected invalid receipt")
        return Response(str(e), status=400, mimetype="text/plain")
    points = calculate_points(receipt)
    receipt_id = get_store().insert(receipt, points)
    logger.info("Accepted receipt %s worth %d points", receipt_id, points)
    return jsonify({"id": receipt_id})


def get_points(**_view_args):
    """
    Router for points lookups under /receipts/. The id is recovered from the
    request path by extract_receipt_id rather than from the URL rule, and used
    to read the points stored for its receipt.

    Returns:
        404 Error if no receipt is stored under the id
        200 OK and the calculated points for the receipt otherwise
    """
    receipt_id = extract_receipt_id(request.path)
    try:
        points = get_store().lookup_points(receipt_id)
    except ReceiptNotFound as e:
        logger.info("No receipt found for id %r", e.receipt_id)
        return Response(str(e), status=404, mimetype="text/plain")
    return jsonify({"points": points})


def receipt_path_not_found(e):
    """ Paths under /receipts/ that no rule matches (e.g. /receipts//points) get the plain lookup miss """
    if request.path.startswith('/receipts/'):
        logger.info("No receipt found for path %r", request.path)
        return Response(NOT_FOUND_MESSAGE, status=404, mimetype="text/plain")
    return e


def create_app(store=None, test_config=None) -> Flask:
    """ Builds the application and the receipt store it owns for its whole lifetime """
    app = Flask(__name__)
    if test_config is not None:
        app.config.update(test_config)
    app.extensions[STORE_EXTENSION_KEY] = store if store is not None else ReceiptStore()
    # /receipts//points must reach the lookup instead of redirecting to /receipts/points
    app.url_map.merge_slashes = False
    app.add_url_rule('/receipts/process', view_func=process_receipt, methods=['POST'])
    app.add_url_rule('/receipts/<path:rest>', view_func=get_points, methods=['GET'])
    app.register_error_handler(404, receipt_path_not_found)
    return app


flask_app = create_app()


if __name__ == '__main__':
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s %(levelname)s %(message)s")
    logger.info("Server started on %s:%d", HOST, PORT)
    flask_app.run(host=HOST, port=PORT, threaded=True)
    # threaded=True serves each request on its own thread
