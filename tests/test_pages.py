# tests/test_pages.py
from unittest.mock import AsyncMock

from redis.exceptions import ConnectionError as RedisConnectionError

from app.cache import RECENT_SEARCHES_KEY
from app.errors import BackendError
from .conftest import make_listing
from .test_utils import print_test_name, print_test_result

DEVICE_HEADERS = {"X-Device-Latitude": "40.015", "X-Device-Longitude": "-105.2705"}


class TestHomePage:

    def test_device_location_then_state_fallback(self, client, mock_api):
        test_name = "test_device_location_then_state_fallback"
        print_test_name(test_name)
        try:
            mock_api.search_by_state = AsyncMock(return_value=[
                make_listing(1, lat=39.74, lng=-104.99),
                make_listing(2, lat=40.02, lng=-105.27),
            ])

            resp = client.get("/api/pages/home", headers=DEVICE_HEADERS)

            assert resp.status_code == 200
            body = resp.json()
            assert body["locationName"] == "Boulder, CO"
            assert body["locationStatus"] == "success"
            assert body["map"]["granularity"] == "state"
            assert body["map"]["zoom"] == 8
            # le plus proche de Boulder d'abord
            assert [l["id"] for l in body["listings"]] == [2, 1]
            assert body["total"] == 2
            assert body["noResults"] is None
            print_test_result(test_name, passed=True)
        except Exception as e:
            print_test_result(test_name, passed=False)
            raise e

    def test_without_geolocation_uses_denver(self, client, mock_api):
        mock_api.search_by_coordinates = AsyncMock(return_value=[make_listing(5, distance=1.2)])

        body = client.get("/api/pages/home").json()

        assert body["locationName"] == "Denver, CO"
        assert body["locationStatus"] == "error"
        assert body["location"]["latitude"] == 39.7392
        assert body["map"] == {"center": {"lat": 39.7392, "lng": -104.9903}, "zoom": 12, "granularity": "point"}

    def test_list_mode_has_no_map(self, client, mock_api):
        mock_api.search_by_coordinates = AsyncMock(return_value=[make_listing(5, distance=1.2)])
        body = client.get("/api/pages/home", params={"mode": "list"}).json()
        assert body["map"] is None
        assert len(body["listings"]) == 1

    def test_all_fallbacks_failing(self, client, mock_api):
        error = BackendError("Failed to reach backend")
        mock_api.search_by_coordinates = AsyncMock(side_effect=error)
        mock_api.search_by_state = AsyncMock(side_effect=error)
        mock_api.default_city_listings = AsyncMock(side_effect=error)

        resp = client.get("/api/pages/home")

        assert resp.status_code == 502
        panel = resp.json()["detail"]["error"]
        assert panel["message"] == "We couldn't load laundromats near you. Please try again."
        assert panel["retry"] is True

    def test_filters_are_forwarded(self, client, mock_api):
        client.get("/api/pages/home", params={
            "lat": "39.7", "lng": "-104.9", "openNow": "true", "services": "wifi,dry-cleaning",
        })
        filters = mock_api.search_by_coordinates.await_args.args[3]
        assert filters.open_now is True
        assert filters.services == ["wifi", "dry-cleaning"]


class TestSearchPage:

    def test_no_parameters_redirects_home(self, client, mock_api):
        body = client.get("/api/pages/search").json()
        assert body["redirect"] == "/"
        mock_api.search.assert_not_called()

    def test_zip_without_results_uses_fallback_listing(self, client, mock_api, fake_cache):
        body = client.get("/api/pages/search", params={"q": "35951"}).json()

        mock_api.search.assert_awaited_once()
        assert body["locationName"] == "Albertville, AL 35951"
        assert [l["name"] for l in body["listings"]] == ["Albertville Laundromat"]
        assert body["noResults"] is None
        assert "ZIP 35951" in fake_cache.store[RECENT_SEARCHES_KEY]

    def test_use_zip_fallback_skips_backend(self, client, mock_api):
        body = client.get("/api/pages/search", params={"q": "35768", "useZipFallback": "true"}).json()
        mock_api.search.assert_not_called()
        assert body["listings"][0]["city"] == "Scottsboro"

    def test_unknown_zip_shows_wider_search_links(self, client):
        body = client.get("/api/pages/search", params={"q": "80202", "radius": "20"}).json()

        panel = body["noResults"]
        assert panel["title"] == "No Laundromats within 20 miles of ZIP 80202"
        assert panel["links"][0]["href"] == "/search?q=80202&radius=25"
        assert body["locationName"] == "ZIP 80202"

    def test_text_search_sorted_by_distance(self, client, mock_api):
        mock_api.search = AsyncMock(return_value=[
            make_listing(1, lat=39.9, lng=-105.0),
            make_listing(2, lat=39.74, lng=-104.99),
        ])
        body = client.get("/api/pages/search", params={
            "location": "Denver", "lat": "39.7392", "lng": "-104.9903",
        }).json()

        assert [l["id"] for l in body["listings"]] == [2, 1]
        assert body["listings"][0]["distance"] < body["listings"][1]["distance"]
        assert body["map"]["granularity"] == "point"

    def test_backend_failure(self, client, mock_api):
        mock_api.search = AsyncMock(side_effect=BackendError("boom", status_code=500))
        resp = client.get("/api/pages/search", params={"q": "Denver"})
        assert resp.status_code == 502
        assert resp.json()["detail"]["error"]["title"] == "Error"


class TestNearbyPage:

    def test_missing_coordinates_redirect_to_search(self, client, mock_api):
        body = client.get("/api/pages/nearby").json()
        assert body["redirect"] == "/search"
        mock_api.nearby.assert_not_called()

    def test_filters_applied_locally(self, client, mock_api):
        mock_api.nearby = AsyncMock(return_value=[
            make_listing(1, distance=0.8, rating="4.8"),
            make_listing(2, distance=0.3, rating="2.0"),
        ])
        body = client.get("/api/pages/nearby", params={
            "lat": "39.7392", "lng": "-104.9903", "rating": "4",
        }).json()

        assert [l["id"] for l in body["listings"]] == [1]
        assert body["map"]["zoom"] == 12

    def test_empty_nearby(self, client):
        body = client.get("/api/pages/nearby", params={"lat": "39.7", "lng": "-104.9"}).json()
        assert body["noResults"]["title"] == "No Results"
        assert body["noResults"]["links"][0]["href"] == "/nearby?lat=39.7&lng=-104.9&radius=15"


class TestDirectoryPages:

    def test_city_page_centered_on_listings(self, client, mock_api):
        mock_api.get_city = AsyncMock(return_value={"id": 7, "name": "Denver", "state": "CO"})
        mock_api.city_listings = AsyncMock(return_value=[
            make_listing(1, lat=39.0, lng=-105.0),
            make_listing(2, lat=40.0, lng=-104.0),
        ])

        body = client.get("/api/pages/cities/denver-co").json()

        assert body["locationName"] == "Denver, CO"
        assert body["map"]["center"] == {"lat": 39.5, "lng": -104.5}
        assert body["map"]["granularity"] == "city"

    def test_state_page(self, client, mock_api):
        mock_api.get_state = AsyncMock(return_value={"name": "Texas", "abbr": "TX"})
        mock_api.state_cities = AsyncMock(return_value=[{"name": "Austin"}])

        body = client.get("/api/pages/states/texas").json()

        mock_api.search_by_state.assert_awaited_once_with("TX")
        assert body["cities"] == [{"name": "Austin"}]
        assert body["map"]["center"]["lat"] == 30.2672

    def test_detail_page_distance_label(self, client, mock_api):
        mock_api.get_listing = AsyncMock(return_value=make_listing(3, lat=40.015, lng=-105.2705))

        body = client.get("/api/pages/laundromats/boulder-suds", params={
            "lat": "39.7392", "lng": "-104.9903",
        }).json()

        assert body["distanceLabel"].endswith(" miles")
        assert body["laundromat"]["distance"] > 20

    def test_detail_page_not_found(self, client, mock_api):
        mock_api.get_listing = AsyncMock(side_effect=BackendError("Laundromat not found", status_code=404))

        resp = client.get("/api/pages/laundromats/nope")

        assert resp.status_code == 404
        assert resp.json()["detail"]["error"]["title"] == "Not Found"

    def test_malformed_city_shows_error_panel(self, client, mock_api):
        mock_api.get_city = AsyncMock(
            side_effect=BackendError("Malformed city payload", path="/api/cities/denver-co")
        )

        resp = client.get("/api/pages/cities/denver-co")

        assert resp.status_code == 502
        assert resp.json()["detail"]["error"]["retry"] is True
        mock_api.city_listings.assert_not_called()


class TestRecentSearches:

    def test_search_page_lists_recent_searches(self, client):
        test_name = "test_search_page_lists_recent_searches"
        print_test_name(test_name)
        try:
            client.get("/api/pages/search", params={"q": "Boulder"})
            body = client.get("/api/pages/search", params={"q": "80202"}).json()

            assert [s["query"] for s in body["recentSearches"]] == ["ZIP 80202", "Boulder"]
            print_test_result(test_name, passed=True)
        except Exception as e:
            print_test_result(test_name, passed=False)
            raise e

    def test_home_page_lists_recent_searches(self, client):
        client.get("/api/pages/search", params={
            "location": "Golden, CO", "lat": "39.75", "lng": "-105.22",
        })

        body = client.get("/api/pages/home").json()

        [recent] = body["recentSearches"]
        assert recent["query"] == "Golden, CO"
        assert (recent["lat"], recent["lng"]) == (39.75, -105.22)


class TestFavorites:

    def test_toggle_favorite_and_detail_flag(self, client, mock_api):
        test_name = "test_toggle_favorite_and_detail_flag"
        print_test_name(test_name)
        try:
            mock_api.get_listing = AsyncMock(return_value=make_listing(3))

            assert client.get("/api/pages/laundromats/suds").json()["isFavorite"] is False

            resp = client.post("/api/pages/laundromats/3/favorite")
            assert resp.status_code == 200
            assert resp.json() == {"laundryId": 3, "favorite": True}
            assert client.get("/api/pages/laundromats/suds").json()["isFavorite"] is True
            assert client.get("/api/pages/favorites").json() == [3]

            assert client.post("/api/pages/laundromats/3/favorite").json()["favorite"] is False
            assert client.get("/api/pages/favorites").json() == []
            print_test_result(test_name, passed=True)
        except Exception as e:
            print_test_result(test_name, passed=False)
            raise e

    def test_favorites_store_down(self, client, fake_cache):
        fake_cache.get = AsyncMock(side_effect=RedisConnectionError("down"))

        resp = client.post("/api/pages/laundromats/3/favorite")

        assert resp.status_code == 503
        assert resp.json()["detail"]["error"]["retry"] is True
