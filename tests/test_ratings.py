from uuid import UUID

from sqlalchemy import select

from src.api.models.rating import Rating
from tests.conftest import accepted_ride, bearer, completed_ride


def test_rating_requires_ended_ride(client, rider, driver):
    _, rider_token = rider
    _, driver_token = driver
    ride = accepted_ride(client, rider_token, driver_token)

    resp = client.post(f"/rider/rateDriver/{ride['id']}", json={"rating": 4}, headers=bearer(rider_token))
    assert resp.status_code == 409
    assert resp.json()["error"] == "InvalidState"


def test_rating_out_of_range_is_400(client, rider, driver):
    _, rider_token = rider
    _, driver_token = driver
    ride = completed_ride(client, rider_token, driver_token)

    for value in (0, 6):
        resp = client.post(f"/rider/rateDriver/{ride['id']}", json={"rating": value}, headers=bearer(rider_token))
        assert resp.status_code == 400
        assert resp.json()["error"] == "ValidationError"


def test_directions_are_independent(client, rider, driver):
    _, rider_token = rider
    _, driver_token = driver
    ride = completed_ride(client, rider_token, driver_token)

    resp = client.post(
        f"/rider/rateDriver/{ride['id']}",
        json={"rating": 3, "comment": "Took a longer route."},
        headers=bearer(rider_token),
    )
    assert resp.status_code == 200
    assert resp.json()["rating"] == 3.0

    resp = client.post(f"/driver/rateRider/{ride['id']}", json={"rating": 5}, headers=bearer(driver_token))
    assert resp.status_code == 200

    dup = client.post(f"/rider/rateDriver/{ride['id']}", json={"rating": 5}, headers=bearer(rider_token))
    assert dup.status_code == 409
    assert dup.json()["error"] == "Conflict"


def test_driver_rating_is_average_of_received_ratings(client, make_rider, driver):
    _, rider_one = make_rider("one@example.com")
    _, rider_two = make_rider("two@example.com")
    _, driver_token = driver

    first = completed_ride(client, rider_one, driver_token)
    second = completed_ride(client, rider_two, driver_token)
    client.post(f"/rider/rateDriver/{first['id']}", json={"rating": 5}, headers=bearer(rider_one))
    resp = client.post(f"/rider/rateDriver/{second['id']}", json={"rating": 2}, headers=bearer(rider_two))

    assert resp.json()["rating"] == 3.5
    assert client.get("/driver/getMyProfile", headers=bearer(driver_token)).json()["rating"] == 3.5


def test_non_participant_cannot_rate(client, make_rider, driver):
    _, owner_token = make_rider("owner@example.com")
    _, other_token = make_rider("other@example.com")
    _, driver_token = driver
    ride = completed_ride(client, owner_token, driver_token)

    resp = client.post(f"/rider/rateDriver/{ride['id']}", json={"rating": 1}, headers=bearer(other_token))
    assert resp.status_code == 403


def test_rating_unknown_ride_is_404(client, rider):
    _, rider_token = rider
    resp = client.post(
        "/rider/rateDriver/00000000-0000-0000-0000-000000000000",
        json={"rating": 4},
        headers=bearer(rider_token),
    )
    assert resp.status_code == 404


def test_rider_ratings_do_not_leak_into_driver_rating(client, admin_token, make_rider, driver):
    user, user_token = make_rider("switcher@example.com")
    _, other_rider = make_rider("other@example.com")
    _, driver_token = driver

    # Rated 1 while still a rider.
    ride = completed_ride(client, user_token, driver_token)
    resp = client.post(f"/driver/rateRider/{ride['id']}", json={"rating": 1}, headers=bearer(driver_token))
    assert resp.json()["rating"] == 1.0

    resp = client.post(
        f"/auth/onboardDriver/{user['id']}",
        json={"license_number": "DL-777", "vehicle_number": "CG04SW0001"},
        headers=bearer(admin_token),
    )
    assert resp.status_code == 201

    # Then rated 5 as a driver; the driver rating only reflects driving.
    ride = completed_ride(client, other_rider, user_token)
    resp = client.post(f"/rider/rateDriver/{ride['id']}", json={"rating": 5}, headers=bearer(other_rider))
    assert resp.status_code == 200
    assert resp.json()["rating"] == 5.0
    assert client.get("/driver/getMyProfile", headers=bearer(user_token)).json()["rating"] == 5.0


def test_rating_accepts_comments_field(client, session_factory, rider, driver):
    _, rider_token = rider
    _, driver_token = driver
    ride = completed_ride(client, rider_token, driver_token)

    resp = client.post(
        f"/rider/rateDriver/{ride['id']}",
        json={"rating": 5, "comments": "Smooth ride."},
        headers=bearer(rider_token),
    )
    assert resp.status_code == 200
    with session_factory() as db:
        stored = db.scalar(select(Rating).where(Rating.ride_id == UUID(ride["id"])))
        assert stored.comment == "Smooth ride."
