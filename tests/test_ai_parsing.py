from __future__ import annotations

import json

from adapters.ai_assistant import parse_element_ids_response, parse_news_digest, parse_order_response

ORDER = {
    "customerName": "Smith & Co. Ltd.",
    "orderedArticles": [
        {"articleName": "High-Speed Router X200", "quantity": 5, "pricePerUnit": 120.0},
        {"articleName": "Cat6 Ethernet Cable (10m)", "quantity": 10, "pricePerUnit": 15},
    ],
}

ELEMENT_IDS = {
    "elementIdCustomerName": "txtCustomer",
    "elementIdArticleName": "txtArticle",
    "elementIdQuantity": "txtQuantity",
    "elementIdPricePerUnit": "txtPrice",
    "elementIdAddItemButton": "btnAdd",
    "elementIdSaveOrderButton": "btnSave",
}


def test_order_keeps_customer_and_line_items():
    order = parse_order_response(json.dumps(ORDER))

    assert order is not None
    assert order.customer_name == "Smith & Co. Ltd."
    assert [(a.article_name, a.quantity, a.price_per_unit) for a in order.ordered_articles] == [
        ("High-Speed Router X200", 5, 120.0),
        ("Cat6 Ethernet Cable (10m)", 10, 15.0),
    ]


def test_order_accepts_fenced_json_with_prose():
    text = "Here you go:\n```json\n" + json.dumps(ORDER) + "\n```"

    order = parse_order_response(text)

    assert order is not None
    assert order.customer_name == "Smith & Co. Ltd."


def test_order_malformed_or_empty_yields_none():
    assert parse_order_response("") is None
    assert parse_order_response(None) is None
    assert parse_order_response("   ") is None
    assert parse_order_response("{not json") is None
    assert parse_order_response('{"orderedArticles": []}') is None
    assert parse_order_response('{"customerName": "A", "orderedArticles": [{"articleName": "x"}]}') is None


def test_element_ids_mapping_unchanged():
    ids = parse_element_ids_response(json.dumps(ELEMENT_IDS))

    assert ids is not None
    assert ids.model_dump(by_alias=True) == ELEMENT_IDS


def test_element_ids_missing_customer_name_yields_none():
    data = dict(ELEMENT_IDS)
    del data["elementIdCustomerName"]

    assert parse_element_ids_response(json.dumps(data)) is None
    assert parse_element_ids_response(json.dumps({**ELEMENT_IDS, "elementIdCustomerName": ""})) is None


def test_element_ids_numeric_ids_are_strings():
    ids = parse_element_ids_response(json.dumps({**ELEMENT_IDS, "elementIdQuantity": 42}))

    assert ids is not None
    assert ids.element_id_quantity == "42"


def test_element_ids_malformed_yields_none():
    assert parse_element_ids_response("[1, 2, 3]") is None
    assert parse_element_ids_response("nothing here") is None


def test_news_digest_parses_camel_case():
    digest = parse_news_digest(
        json.dumps({"summaryBulletPoints": ["a", "b", "c"], "breakingNewsProbabilityInPercent": 85})
    )

    assert digest is not None
    assert digest.summary_bullet_points == ["a", "b", "c"]
    assert digest.breaking_news_probability_in_percent == 85


def test_news_digest_out_of_range_probability_is_rejected():
    assert parse_news_digest(json.dumps({"summaryBulletPoints": [], "breakingNewsProbabilityInPercent": 150})) is None
