def _new_cart(client):
    res = client.post("/cart/")
    assert res.status_code == 201
    return res.json()["cart_id"]


def _add(client, cart_id, product, qty=1, options=None):
    return client.post(
        f"/cart/{cart_id}/add",
        json={"product_id": product.id, "qty": qty, "options": options or {}},
    )


def test_new_cart_is_empty(client):
    cart_id = _new_cart(client)

    res = client.get(f"/cart/{cart_id}")
    assert res.status_code == 200
    data = res.json()
    assert data["items"] == []
    assert data["totals"]["total_cents"] == 0
    assert data["totals"]["promotion"]["promo_name"] == "NONE"


def test_unknown_cart_is_404(client):
    assert client.get("/cart/does-not-exist").status_code == 404


def test_add_single_item_charges_shipping(client, catalog):
    cart_id = _new_cart(client)

    res = _add(client, cart_id, catalog["away"])
    assert res.status_code == 200
    data = res.json()
    assert len(data["items"]) == 1
    assert data["items"][0]["unit_price_cents"] == 2999
    assert data["totals"]["shipping_cents"] == 500
    assert data["totals"]["total_cents"] == 2999 + 500
    assert data["total_label"] == "€34.99"


def test_same_product_and_options_merge(client, catalog):
    cart_id = _new_cart(client)

    _add(client, cart_id, catalog["home"], 1, {"size": "4XL", "patch": ""})
    data = _add(client, cart_id, catalog["home"], 2, {"size": "4XL"}).json()

    assert len(data["items"]) == 1
    item = data["items"][0]
    assert item["qty"] == 3
    assert item["options"] == {"size": "4XL"}
    assert item["unit_price_cents"] == 3499 + 300


def test_different_options_make_separate_lines(client, catalog):
    cart_id = _new_cart(client)

    _add(client, cart_id, catalog["home"], 1, {"size": "S"})
    data = _add(client, cart_id, catalog["home"], 1, {"size": "S", "patch": "champions"}).json()

    assert [i["unit_price_cents"] for i in data["items"]] == [3499, 3499 + 500]


def test_line_quantity_is_capped(client, catalog):
    cart_id = _new_cart(client)

    _add(client, cart_id, catalog["retro"], 90)
    data = _add(client, cart_id, catalog["retro"], 20).json()

    assert data["items"][0]["qty"] == 99


def test_add_validates_quantity(client, catalog):
    cart_id = _new_cart(client)
    assert _add(client, cart_id, catalog["retro"], 0).status_code == 422
    assert _add(client, cart_id, catalog["retro"], 100).status_code == 422


def test_inactive_or_missing_product_is_404(client, catalog):
    cart_id = _new_cart(client)
    assert _add(client, cart_id, catalog["hidden"]).status_code == 404

    res = client.post(f"/cart/{cart_id}/add", json={"product_id": 9999, "qty": 1})
    assert res.status_code == 404


def test_promotion_applies_across_lines(client, catalog):
    cart_id = _new_cart(client)

    _add(client, cart_id, catalog["home"], 2)
    _add(client, cart_id, catalog["away"], 2)
    data = _add(client, cart_id, catalog["retro"], 1).json()

    totals = data["totals"]
    assert totals["promotion"]["promo_name"] == "BUY_3_GET_5"
    assert totals["promotion"]["free_items_applied"] == 2
    assert totals["shipping_cents"] == 0
    # retro plus one away kit are the two cheapest units
    assert totals["discount_cents"] == 1999 + 2999

    by_name = {i["name"]: i for i in data["items"]}
    assert by_name["Retro 1998"]["free_qty"] == 1
    assert by_name["Away Kit 24/25"]["free_qty"] == 1
    assert by_name["Away Kit 24/25"]["line_total_cents"] == 2999
    assert by_name["Home Kit 24/25"]["free_qty"] == 0


def test_update_and_remove_items(client, catalog):
    cart_id = _new_cart(client)
    data = _add(client, cart_id, catalog["away"], 1).json()
    item_id = data["items"][0]["item_id"]

    data = client.put(f"/cart/{cart_id}/items/{item_id}", json={"qty": 4}).json()
    assert data["items"][0]["qty"] == 4
    assert data["totals"]["promotion"]["promo_name"] == "BUY_2_GET_3"

    data = client.put(f"/cart/{cart_id}/items/{item_id}", json={"qty": 0}).json()
    assert data["items"] == []

    res = client.delete(f"/cart/{cart_id}/items/{item_id}")
    assert res.status_code == 404


def test_delete_item_and_clear(client, catalog):
    cart_id = _new_cart(client)
    _add(client, cart_id, catalog["away"], 1)
    data = _add(client, cart_id, catalog["retro"], 1).json()

    retro_id = next(i["item_id"] for i in data["items"] if i["product_id"] == catalog["retro"].id)
    data = client.delete(f"/cart/{cart_id}/items/{retro_id}").json()
    assert len(data["items"]) == 1

    assert client.delete(f"/cart/{cart_id}/clear").json() == {"message": "Cart cleared"}
    assert client.get(f"/cart/{cart_id}").json()["items"] == []


def test_items_from_another_cart_are_not_reachable(client, catalog):
    first = _new_cart(client)
    second = _new_cart(client)
    item_id = _add(client, first, catalog["away"]).json()["items"][0]["item_id"]

    res = client.put(f"/cart/{second}/items/{item_id}", json={"qty": 3})
    assert res.status_code == 404


def _add_personalized(client, cart_id, product, personalization, qty=1):
    return client.post(
        f"/cart/{cart_id}/add",
        json={"product_id": product.id, "qty": qty, "personalization": personalization},
    )


def test_personalization_is_sanitised(client, catalog):
    cart_id = _new_cart(client)

    data = _add_personalized(
        client, cart_id, catalog["home"], {"name": "  cristiano ronaldo jr  ", "number": "#0756"}
    ).json()

    item = data["items"][0]
    assert item["options"] == {"custName": "CRISTIANO RONA", "custNumber": "075"}
    assert item["personalization"] == {"name": "CRISTIANO RONA", "number": "075", "player_id": None}
    # printing does not change the price
    assert item["unit_price_cents"] == 3499


def test_same_personalization_merges(client, catalog):
    cart_id = _new_cart(client)

    _add_personalized(client, cart_id, catalog["home"], {"name": "ronaldo", "number": "7"})
    data = _add_personalized(client, cart_id, catalog["home"], {"name": " RONALDO ", "number": " 7 "}, 2).json()

    assert len(data["items"]) == 1
    assert data["items"][0]["qty"] == 3


def test_different_personalization_makes_separate_lines(client, catalog):
    cart_id = _new_cart(client)

    _add(client, cart_id, catalog["home"], 1)
    _add_personalized(client, cart_id, catalog["home"], {"name": "eusebio", "number": "10"})
    data = _add_personalized(client, cart_id, catalog["home"], {"name": "eusebio", "number": "11"}).json()

    assert len(data["items"]) == 3
    assert [i["options"].get("custNumber") for i in data["items"]] == [None, "10", "11"]


def test_blank_personalization_counts_as_none(client, catalog):
    cart_id = _new_cart(client)

    _add(client, cart_id, catalog["retro"], 1)
    data = _add_personalized(client, cart_id, catalog["retro"], {"name": "   ", "number": "--"}).json()

    assert len(data["items"]) == 1
    assert data["items"][0]["qty"] == 2
    assert data["items"][0]["personalization"] is None
