import pytest

from foodhub.exceptions import ValidationError
from foodhub.models import Merchant
from foodhub.services.geospatial_service import GeospatialService


def add_merchant(db, vendor, name, latitude, longitude, radius=None, is_active=True, **fields):
    merchant = Merchant(
        **fields,
        vendor_id=vendor.id,
        outlet_name=name,
        latitude=latitude,
        longitude=longitude,
        delivery_radius_meters=radius,
        is_active=is_active,
    )
    db.add(merchant)
    db.commit()
    return merchant


@pytest.fixture
def service(db):
    return GeospatialService(db)


def names(result):
    return [merchant["outlet_name"] for merchant in result["merchants"]]


def test_radius_search_sorts_by_distance(db, catalog, service):
    add_merchant(db, catalog.burger_co, "Burger Co Uptown", 0.0, 0.01)

    result = service.find_merchants_within_radius(0.0, 0.0, 5000)

    assert names(result) == ["Burger Co Downtown", "Burger Co Uptown", "Pizza Co Harbour"]
    assert result["totalCount"] == 3
    distances = [merchant["distance_meters"] for merchant in result["merchants"]]
    assert distances == sorted(distances)


def test_results_are_annotated(db, catalog, service):
    result = service.find_merchants_within_radius(0.0, 0.0, 5000)
    harbour = result["merchants"][-1]

    assert harbour["distance_meters"] == pytest.approx(2223.9, abs=1)
    assert harbour["distance_km"] == pytest.approx(2.22, abs=0.01)
    assert harbour["estimated_delivery_minutes"] == 14
    assert harbour["vendor_id"] == catalog.pizza_co.id


def test_radius_boundary_is_inclusive(db, catalog, service):
    exact_distance = service.distance_between(0.0, 0.0, 0.0, 0.02)

    included = service.find_merchants_within_radius(0.0, 0.0, exact_distance)
    excluded = service.find_merchants_within_radius(0.0, 0.0, exact_distance - 0.01)

    assert "Pizza Co Harbour" in names(included)
    assert "Pizza Co Harbour" not in names(excluded)


def test_merchants_without_location_or_inactive_are_skipped(db, catalog, service):
    add_merchant(db, catalog.burger_co, "Ghost Kitchen", None, None, radius=5000)
    add_merchant(db, catalog.burger_co, "Closed Outlet", 0.0, 0.001, radius=5000, is_active=False)

    assert names(service.find_merchants_within_radius(0.0, 0.0, 5000)) == [
        "Burger Co Downtown", "Pizza Co Harbour"
    ]
    assert "Closed Outlet" in names(service.find_merchants_within_radius(0.0, 0.0, 5000, include_inactive=True))
    assert "Ghost Kitchen" not in names(service.find_merchants_within_radius(0.0, 0.0, 5000, include_inactive=True))


def test_delivery_range_uses_each_merchants_radius(db, catalog, service):
    add_merchant(db, catalog.burger_co, "No Delivery", 0.0, 0.001, radius=None)
    add_merchant(db, catalog.burger_co, "Pickup Only", 0.0, 0.001, radius=0)

    # Downtown (0 m away, 5 km radius) delivers; Harbour (~2.2 km away, 1 km radius) does not
    result = service.find_merchants_in_delivery_range(0.0, 0.0)

    assert names(result) == ["Burger Co Downtown"]
    assert result["totalCount"] == 1


def test_delivery_range_far_from_everyone(db, catalog, service):
    result = service.find_merchants_in_delivery_range(10.0, 10.0)

    assert result["merchants"] == []
    assert result["totalCount"] == 0
    assert result["pagination"]["totalPages"] == 0


def test_pagination_describes_filtered_set(db, catalog, service):
    for index in range(1, 5):
        add_merchant(db, catalog.burger_co, f"Outlet {index}", 0.0, index * 0.001)

    first_page = service.find_merchants_within_radius(0.0, 0.0, 1000, limit=2, offset=0)
    second_page = service.find_merchants_within_radius(0.0, 0.0, 1000, limit=2, offset=2)
    last_page = service.find_merchants_within_radius(0.0, 0.0, 1000, limit=2, offset=4)

    assert names(first_page) == ["Burger Co Downtown", "Outlet 1"]
    assert names(second_page) == ["Outlet 2", "Outlet 3"]
    assert names(last_page) == ["Outlet 4"]
    assert first_page["pagination"] == {
        "currentPage": 1,
        "totalPages": 3,
        "totalItems": 5,
        "itemsPerPage": 2,
        "hasNext": True,
        "hasPrev": False,
    }
    assert last_page["pagination"]["currentPage"] == 3
    assert last_page["pagination"]["hasNext"] is False


def test_every_merchant_in_range_is_considered(db, catalog):
    for index in range(3):
        add_merchant(db, catalog.burger_co, f"Far {index}", 40.0, 40.0 + index, radius=50000, id=f"0000-far-{index}")
    add_merchant(db, catalog.burger_co, "Near", 0.0, 0.0001, radius=50, id="zzzz-near")

    service = GeospatialService(db, scan_batch_size=1)
    result = service.find_merchants_within_radius(0.0, 0.0001, 1000)

    assert names(result)[0] == "Near"
    assert result["totalCount"] == 2
    assert names(service.find_merchants_in_delivery_range(0.0, 0.0001)) == ["Near", "Burger Co Downtown"]


def test_far_merchants_are_still_matched_by_a_large_radius(db, catalog):
    add_merchant(db, catalog.burger_co, "Across The Antimeridian", 0.0, -179.9)

    result = GeospatialService(db).find_merchants_within_radius(0.0, 179.9, 50000)

    assert names(result) == ["Across The Antimeridian"]


def test_constants_are_injectable(db, catalog):
    service = GeospatialService(db, eta_base_minutes=0, eta_minutes_per_km=1)
    assert service.estimate_delivery_minutes(5000) == 5


@pytest.mark.parametrize("kwargs", [
    {"latitude": 91.0, "longitude": 0.0, "radius_meters": 1000},
    {"latitude": 0.0, "longitude": -181.0, "radius_meters": 1000},
    {"latitude": 0.0, "longitude": 0.0, "radius_meters": -1},
    {"latitude": 0.0, "longitude": 0.0, "radius_meters": 1000, "limit": 0},
    {"latitude": 0.0, "longitude": 0.0, "radius_meters": 1000, "limit": 201},
    {"latitude": 0.0, "longitude": 0.0, "radius_meters": 1000, "offset": -1},
])
def test_invalid_queries(db, catalog, service, kwargs):
    with pytest.raises(ValidationError):
        service.find_merchants_within_radius(**kwargs)


def test_performance_metrics(db, catalog, service):
    add_merchant(db, catalog.burger_co, "Ghost Kitchen", None, None)
    add_merchant(db, catalog.burger_co, "Closed Outlet", 0.0, 0.001, is_active=False)

    metrics = service.get_performance_metrics()

    assert metrics["totalActiveMerchants"] == 3
    assert metrics["locatedActiveMerchants"] == 2
    assert "timestamp" in metrics
