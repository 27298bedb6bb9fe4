import json
import uuid
import pytest
from concurrent.futures import ThreadPoolExecutor
from app import create_app

INVALID_RECEIPT = "The receipt is invalid."
NOT_FOUND = "No receipt found for that ID."

valid_receipts = {
    json.dumps({
        "retailer": "Target",
        "purchaseDate": "2022-01-01",
        "purchaseTime": "13:01",
        "items": [
            {
                "shortDescription": "Mountain Dew 12PK",
                "price": "6.49"
            }, {
                "shortDescription": "Emils Cheese Pizza",
                "price": "12.25"
            }, {
                "shortDescription": "Knorr Creamy Chicken",
                "price": "1.26"
            }, {
                "shortDescription": "Doritos Nacho Cheese",
                "price": "3.35"
            }, {
                "shortDescription": "   Klarbrunn 12-PK 12 FL OZ  ",
                "price": "12.00"
            }
        ],
        "total": "35.35"
    }): 28,
    json.dumps({
        "retailer": "M&M Corner Market",
        "purchaseDate": "2022-03-20",
        "purchaseTime": "14:33",
        "items": [
            {
                "shortDescription": "Gatorade",
                "price": "2.25"
            }, {
                "shortDescription": "Gatorade",
                "price": "2.25"
            }, {
                "shortDescription": "Gatorade",
                "price": "2.25"
            }, {
                "shortDescription": "Gatorade",
                "price": "2.25"
            }
        ],
        "total": "9.00"
    }): 109,
    json.dumps({
        "retailer": "Walgreens",
        "purchaseDate": "2022-01-02",
        "purchaseTime": "08:13",
        "total": "2.65",
        "items": [
            {"shortDescription": "Pepsi - 12-oz", "price": "1.25"},
            {"shortDescription": "Dasani", "price": "1.40"}
        ]
    }): 15,
    json.dumps({
        "retailer": "Target",
        "purchaseDate": "2022-01-02",
        "purchaseTime": "13:13",
        "total": "1.25",
        "items": [
            {"shortDescription": "Pepsi - 12-oz", "price": "1.25"}
        ]
    }): 31
}

required_receipt_attributes = ["retailer", "total", "items", "purchaseDate", "purchaseTime"]


@pytest.fixture
def app():
    return create_app(test_config={'TESTING': True})


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def simple_receipt_skeleton():
    return {
        "retailer": "Target",
        "purchaseDate": "2022-01-02",
        "purchaseTime": "13:13",
        "total": "1.25",
        "items": [
            {"shortDescription": "Pepsi - 12-oz", "price": "1.25"}
        ]
    }


def post_receipt(client, receipt):
    return client.post('/receipts/process', content_type='application/json', data=json.dumps(receipt))


def assert_invalid(response):
    assert response.status_code == 400
    assert response.mimetype == "text/plain"
    assert response.get_data(as_text=True) == INVALID_RECEIPT


def test_process_valid_receipts(client):
    for test_json, expected_points in valid_receipts.items():
        expected = {"points": expected_points}
        process_response = client.post('/receipts/process', content_type='application/json', data=test_json)
        assert process_response.status_code == 200
        receipt_id = json.loads(process_response.data)["id"]
        assert uuid.UUID(receipt_id).version == 4
        get_response = client.get(f'/receipts/{receipt_id}/points')
        assert get_response.status_code == 200
        assert expected == json.loads(get_response.data)


def test_process_receipts_unique_ids(client, simple_receipt_skeleton):
    receipt_ids = []
    for i in range(10):
        process_response = post_receipt(client, simple_receipt_skeleton)
        receipt_ids.append(json.loads(process_response.data)["id"])
    assert len(set(receipt_ids)) == len(receipt_ids)


def test_process_receipts_whitespace_retailer_is_accepted(client, simple_receipt_skeleton):
    simple_receipt_skeleton["retailer"] = "   "
    process_response = post_receipt(client, simple_receipt_skeleton)
    assert process_response.status_code == 200
    receipt_id = json.loads(process_response.data)["id"]
    get_response = client.get(f'/receipts/{receipt_id}/points')
    assert json.loads(get_response.data) == {"points": 25}


def test_process_receipts_invalid_retailer_name(client, simple_receipt_skeleton):
    invalid_names = ["", "Target@Home", "Shop*Name", "Store#1", "Café"]
    for name in invalid_names:
        simple_receipt_skeleton["retailer"] = name
        assert_invalid(post_receipt(client, simple_receipt_skeleton))


def test_process_receipts_invalid_purchase_date(client, simple_receipt_skeleton):
    invalid_dates = ["test", "2022-13-01", "2023-15-15", "2023-10-99", "2023-02-30", "2022-1-01",
                     "dummydummydummy", "", '9999-99-99']
    for date in invalid_dates:
        simple_receipt_skeleton["purchaseDate"] = date
        assert_invalid(post_receipt(client, simple_receipt_skeleton))


def test_process_receipts_invalid_attribute_formats_except_items(client, simple_receipt_skeleton):
    invalid_elements = [None, [], 25, 3.88, {}]
    for attribute in required_receipt_attributes:
        if attribute != "items":
            original = simple_receipt_skeleton[attribute]
            for elem in invalid_elements:
                simple_receipt_skeleton[attribute] = elem
                assert_invalid(post_receipt(client, simple_receipt_skeleton))
            simple_receipt_skeleton[attribute] = original


def test_process_receipts_missing_attributes(client, simple_receipt_skeleton):
    for attribute in required_receipt_attributes:
        receipt = dict(simple_receipt_skeleton)
        del receipt[attribute]
        assert_invalid(post_receipt(client, receipt))


def test_process_receipts_invalid_items_format(client, simple_receipt_skeleton):
    invalid_elements = [None, 25, 3.88, {}, ""]
    for elem in invalid_elements:
        simple_receipt_skeleton["items"] = elem
        assert_invalid(post_receipt(client, simple_receipt_skeleton))


def test_process_receipts_invalid_items_list_length(client, simple_receipt_skeleton):
    simple_receipt_skeleton["items"] = []
    assert_invalid(post_receipt(client, simple_receipt_skeleton))


def test_process_receipts_invalid_item_formats(client, simple_receipt_skeleton):
    invalid_elements = [None, 25, 3.88, [], ""]
    for elem in invalid_elements:
        simple_receipt_skeleton["items"][0] = elem
        assert_invalid(post_receipt(client, simple_receipt_skeleton))
    invalid_elements = [None, 25, 3.88, [], {}]
    for attribute in ["shortDescription", "price"]:
        for elem in invalid_elements:
            simple_receipt_skeleton["items"][0] = {"shortDescription": "Pepsi - 12-oz", "price": "1.25"}
            simple_receipt_skeleton["items"][0][attribute] = elem
            assert_invalid(post_receipt(client, simple_receipt_skeleton))


def test_process_receipts_invalid_item_descriptions(client, simple_receipt_skeleton):
    invalid_descriptions = ["", "???", "&&&&", "<<<<>>>>", "\\\\"]
    for description in invalid_descriptions:
        simple_receipt_skeleton["items"][0]["shortDescription"] = description
        assert_invalid(post_receipt(client, simple_receipt_skeleton))


def test_process_receipts_invalid_item_price(client, simple_receipt_skeleton):
    invalid_prices = ["test", "0", "333", "", "5.310", ".22", "-1.25", "1e2"]
    for price in invalid_prices:
        simple_receipt_skeleton["items"][0]["price"] = price
        assert_invalid(post_receipt(client, simple_receipt_skeleton))


def test_process_receipts_invalid_purchase_time(client, simple_receipt_skeleton):
    invalid_times = ["test", "13:99", "99:13", "99:99", "25:00", "24:00", "9:05", "dummydummydummy", "", '13-13']
    for time in invalid_times:
        simple_receipt_skeleton["purchaseTime"] = time
        assert_invalid(post_receipt(client, simple_receipt_skeleton))


def test_process_receipts_invalid_total(client, simple_receipt_skeleton):
    invalid_totals = ["test", "0", "333", "", "12.5", "12.500", ".22", "+1.25"]
    for total in invalid_totals:
        simple_receipt_skeleton["total"] = total
        assert_invalid(post_receipt(client, simple_receipt_skeleton))


def test_process_receipts_malformed_json(client):
    for body in ["", "not json", "{", "[]", "\"receipt\"", "null"]:
        response = client.post('/receipts/process', content_type='application/json', data=body)
        assert_invalid(response)


def test_get_points_nonexistent_id(client):
    for receipt_id in [str(uuid.uuid4()), "test", "abc-123"]:
        res = client.get(f'/receipts/{receipt_id}/points')
        assert res.status_code == 404
        assert res.mimetype == "text/plain"
        assert res.get_data(as_text=True) == NOT_FOUND


def test_get_points_id_not_extractable_from_path(client, simple_receipt_skeleton):
    process_response = post_receipt(client, simple_receipt_skeleton)
    receipt_id = json.loads(process_response.data)["id"]
    res = client.get(f'/receipts/{receipt_id.upper()}/points')
    assert res.status_code == 404
    assert res.get_data(as_text=True) == NOT_FOUND


def test_get_points_unmatched_receipts_paths(client):
    for path in ['/receipts//points', '/receipts/abc', '/receipts/abc/points/extra',
                 '/receipts/points', '/receipts/']:
        res = client.get(path)
        assert res.status_code == 404
        assert res.mimetype == "text/plain"
        assert res.get_data(as_text=True) == NOT_FOUND


def test_get_points_with_trailing_path_segments(client, simple_receipt_skeleton):
    process_response = post_receipt(client, simple_receipt_skeleton)
    receipt_id = json.loads(process_response.data)["id"]
    res = client.get(f'/receipts/{receipt_id}/points/extra')
    assert res.status_code == 200
    assert json.loads(res.data) == {"points": 31}


def test_unknown_paths_outside_receipts_keep_default_404(client):
    res = client.get('/unknown')
    assert res.status_code == 404
    assert res.get_data(as_text=True) != NOT_FOUND


def test_get_points_idempotency(client, simple_receipt_skeleton):
    process_response = post_receipt(client, simple_receipt_skeleton)
    receipt_id = json.loads(process_response.data)["id"]
    for i in range(5):
        get_response = client.get(f'/receipts/{receipt_id}/points')
        assert get_response.status_code == 200
        assert json.loads(get_response.data)["points"] == 31


def test_receipts_are_not_shared_between_apps(simple_receipt_skeleton):
    first = create_app(test_config={'TESTING': True}).test_client()
    second = create_app(test_config={'TESTING': True}).test_client()
    receipt_id = json.loads(post_receipt(first, simple_receipt_skeleton).data)["id"]
    assert first.get(f'/receipts/{receipt_id}/points').status_code == 200
    assert second.get(f'/receipts/{receipt_id}/points').status_code == 404


def test_process_receipts_concurrency(client, simple_receipt_skeleton):
    params = [simple_receipt_skeleton] * 300

    def test_post(json_param):
        response = client.post('/receipts/process', json=json_param)
        return response.status_code, json.loads(response.data)["id"]

    with ThreadPoolExecutor(max_workers=50) as pool:
        results = list(pool.map(test_post, params))
    assert all(status == 200 for status, _ in results)
    receipt_ids = {receipt_id for _, receipt_id in results}
    assert len(receipt_ids) == len(params)
    for receipt_id in list(receipt_ids)[:20]:
        assert json.loads(client.get(f'/receipts/{receipt_id}/points').data) == {"points": 31}


def test_get_points_concurrency(client, simple_receipt_skeleton):
    process_response = post_receipt(client, simple_receipt_skeleton)
    receipt_id = json.loads(process_response.data)["id"]
    params = [receipt_id] * 300

    def test_get(id_param):
        return client.get(f'/receipts/{id_param}/points').get_json()

    with ThreadPoolExecutor(max_workers=50) as pool:
        results = list(pool.map(test_get, params))
    assert all(result == {"points": 31} for result in results)
