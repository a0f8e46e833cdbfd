import pytest

from app.exceptions import InvalidFilterError
from app.schemas.vehicle import VehicleFilter
from app.services.vehicle_service import query_to_filter


class TestVehicleFilterBuild:
    def test_defaults(self):
        f = VehicleFilter().build()
        assert f.page == 1
        assert f.page_size == 10
        assert f.sort_field == "created_at"
        assert f.sort_order == "asc"
        assert f.descending is False
        assert f.skip == 0
        assert f.object_id is None

    def test_page_size_clamped_to_100(self):
        assert VehicleFilter(page_size=250).build().page_size == 100

    def test_zero_values_get_defaults(self):
        f = VehicleFilter(page=0, page_size=0).build()
        assert (f.page, f.page_size) == (1, 10)

    def test_negative_values_get_defaults(self):
        f = VehicleFilter(page=-3, page_size=-1).build()
        assert (f.page, f.page_size) == (1, 10)

    def test_skip_follows_page(self):
        assert VehicleFilter(page=3, page_size=20).build().skip == 40

    @pytest.mark.parametrize("order, descending", [
        ("", False), ("asc", False), ("desc", True), ("DESC", False), ("sideways", False),
    ])
    def test_only_desc_sorts_descending(self, order, descending):
        assert VehicleFilter(sort_order=order).build().descending is descending

    def test_invalid_status_rejected(self):
        with pytest.raises(InvalidFilterError):
            VehicleFilter(vehicle_status="flying").build()

    def test_invalid_id_rejected(self):
        with pytest.raises(InvalidFilterError):
            VehicleFilter(id="not-an-id").build()

    def test_valid_id_parsed(self):
        f = VehicleFilter(id="6734c2a5eb0eff570b970eb1").build()
        assert str(f.object_id) == "6734c2a5eb0eff570b970eb1"


class TestQueryToFilter:
    def test_url_keys_map_to_fields(self):
        f = query_to_filter({
            "page": ["2"],
            "limit": ["5"],
            "sort_by": ["vehicle_name"],
            "sort_order": ["desc"],
            "_id": ["6734c2a5eb0eff570b970eb1"],
            "vehicle_name": ["Hino"],
            "vehicle_model": ["500"],
            "license_number": ["AA"],
            "vehicle_status": ["repair"],
            "mileage": ["150.5"],
        })
        assert f.page == 2
        assert f.page_size == 5
        assert f.sort_field == "vehicle_name"
        assert f.sort_order == "desc"
        assert f.id == "6734c2a5eb0eff570b970eb1"
        assert f.vehicle_name == "Hino"
        assert f.vehicle_model == "500"
        assert f.license_number == "AA"
        assert f.vehicle_status == "repair"
        assert f.mileage == 150.5

    def test_first_value_wins(self):
        assert query_to_filter({"vehicle_name": ["a", "b"]}).vehicle_name == "a"

    def test_unknown_keys_ignored(self):
        f = query_to_filter({"colour": ["red"], "page": ["1"]})
        assert f.page == 1
        assert not hasattr(f, "colour")

    @pytest.mark.parametrize("key", ["page", "limit", "mileage"])
    def test_non_numeric_rejected(self, key):
        with pytest.raises(InvalidFilterError):
            query_to_filter({key: ["abc"]})
