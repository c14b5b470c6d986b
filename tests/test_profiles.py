from tests.conftest import bearer, completed_ride


def test_rider_profile(client, rider):
    user, rider_token = rider
    resp = client.get("/rider/getMyProfile", headers=bearer(rider_token))
    assert resp.status_code == 200
    body = resp.json()
    assert body["id"] == user["id"]
    assert body["rating"] == 5.0


def test_driver_profile(client, driver):
    user, driver_token = driver
    resp = client.get("/driver/getMyProfile", headers=bearer(driver_token))
    assert resp.status_code == 200
    body = resp.json()
    assert body["id"] == user["id"]
    assert body["vehicle_number"] == "CG04AB1234"
    assert body["license_number"] == "DL-12345"


def test_ride_history_pages_of_four_and_only_own_rides(client, make_rider, driver):
    _, rider_token = make_rider("mine@example.com")
    _, other_rider = make_rider("theirs@example.com")
    _, driver_token = driver

    mine = [completed_ride(client, rider_token, driver_token)["id"] for _ in range(5)]
    theirs = completed_ride(client, other_rider, driver_token)["id"]

    page0 = client.get("/rider/getMyRides", params={"pageNumber": 0}, headers=bearer(rider_token)).json()
    page1 = client.get("/rider/getMyRides", params={"pageNumber": 1}, headers=bearer(rider_token)).json()
    page2 = client.get("/rider/getMyRides", params={"pageNumber": 2}, headers=bearer(rider_token)).json()

    assert len(page0) == 4
    assert len(page1) == 1
    assert page2 == []
    seen = [r["id"] for r in page0 + page1]
    assert sorted(seen) == sorted(mine)
    assert theirs not in seen

    driver_rides = client.get("/driver/getMyRides", params={"pageNumber": 1}, headers=bearer(driver_token)).json()
    assert len(driver_rides) == 2


def test_ride_history_sorted_ascending(client, rider, driver):
    _, rider_token = rider
    _, driver_token = driver
    for _ in range(3):
        completed_ride(client, rider_token, driver_token)

    rides = client.get("/rider/getMyRides", params={"sortBy": "id"}, headers=bearer(rider_token)).json()
    ids = [r["id"] for r in rides]
    assert ids == sorted(ids)


def test_ride_history_rejects_unknown_sort_field(client, rider):
    _, rider_token = rider
    resp = client.get(
        "/rider/getMyRides",
        params={"sortBy": "rider_id; DROP TABLE rides"},
        headers=bearer(rider_token),
    )
    assert resp.status_code == 400
    assert resp.json()["error"] == "ValidationError"


def test_ride_history_rejects_negative_page(client, driver):
    _, driver_token = driver
    resp = client.get("/driver/getMyRides", params={"pageNumber": -1}, headers=bearer(driver_token))
    assert resp.status_code == 400
