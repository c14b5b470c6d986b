from src.api.main import app


def test_routes_document_error_responses():
    paths = app.openapi()["paths"]

    accept = paths["/driver/acceptRide/{ride_request_id}"]["post"]["responses"]
    assert {"401", "403", "404", "409"} <= set(accept)

    rate = paths["/rider/rateDriver/{ride_id}"]["post"]["responses"]
    assert {"400", "401", "403", "404", "409"} <= set(rate)
    schema_ref = rate["409"]["content"]["application/json"]["schema"]["$ref"]
    assert schema_ref.endswith("/ErrorBody")

    signup = paths["/auth/signup"]["post"]["responses"]
    assert {"400", "409"} <= set(signup)
