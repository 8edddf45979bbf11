"""Bootcamp API tests: listing, ownership, geocoding, radius search and photo upload."""

from __future__ import annotations

import json
import os
import tempfile
import unittest
from pathlib import Path

from fastapi.testclient import TestClient

from devcamper.adapters.geocoding import GeocodedLocation, StaticGeocoder
from devcamper.adapters.geocoding.static import load_static_table
from devcamper.core.config import get_settings
from devcamper.domain.geo import GeoPoint
from devcamper.main import create_app
from devcamper.routes.dependencies import get_geocoder

BOSTON_ADDRESS = "233 Bay State Rd Boston MA 02215"
LOWELL_ADDRESS = "220 Pawtucket St, Lowell, MA 01854"

PUBLISHER = {"Authorization": "Bearer test:pub-1:publisher"}
OTHER_PUBLISHER = {"Authorization": "Bearer test:pub-2:publisher"}
PLAIN_USER = {"Authorization": "Bearer test:user-1:user"}
ADMIN = {"Authorization": "Bearer test:root:admin"}


def _geocoder() -> StaticGeocoder:
    boston = GeocodedLocation(
        point=GeoPoint(latitude=42.3505, longitude=-71.1054),
        formatted_address="233 Bay State Rd, Boston, MA 02215, US",
        city="Boston",
        state="MA",
        zipcode="02215",
        country="US",
    )
    lowell = GeocodedLocation(
        point=GeoPoint(latitude=42.6389, longitude=-71.3221),
        city="Lowell",
        state="MA",
        zipcode="01854",
        country="US",
    )
    return StaticGeocoder(
        {
            BOSTON_ADDRESS: boston,
            LOWELL_ADDRESS: lowell,
            "02215": boston,
            "10001": GeocodedLocation(point=GeoPoint(latitude=40.7506, longitude=-73.9935), zipcode="10001"),
        }
    )


def _bootcamp_body(name: str = "Devworks Bootcamp", address: str = BOSTON_ADDRESS, **extra) -> dict:
    body = {
        "name": name,
        "description": "Devworks is a full stack JavaScript Bootcamp",
        "website": "https://devworks.com",
        "email": "enroll@devworks.com",
        "address": address,
        "careers": ["Web Development", "UI/UX", "Business"],
        "housing": True,
        "job_assistance": True,
    }
    body.update(extra)
    return body


class _SettingsEnvCase(unittest.TestCase):
    _env_keys = (
        "DEVCAMPER_AUTH_PROVIDER",
        "DEVCAMPER_FILE_UPLOAD_PATH",
        "DEVCAMPER_MAX_FILE_UPLOAD_BYTES",
        "DEVCAMPER_MAX_PAGE_LIMIT",
    )

    def setUp(self) -> None:
        self._old_env = {k: os.environ.get(k) for k in self._env_keys}
        self._uploads = tempfile.TemporaryDirectory()
        os.environ["DEVCAMPER_AUTH_PROVIDER"] = "mock"
        os.environ["DEVCAMPER_FILE_UPLOAD_PATH"] = self._uploads.name
        os.environ["DEVCAMPER_MAX_FILE_UPLOAD_BYTES"] = "64"
        os.environ.pop("DEVCAMPER_MAX_PAGE_LIMIT", None)
        get_settings.cache_clear()

        self.geocoder = _geocoder()
        self.app = create_app()
        self.app.dependency_overrides[get_geocoder] = lambda: self.geocoder
        self.client = TestClient(self.app)
        self.store = self.app.state.store

    def tearDown(self) -> None:
        for key, value in self._old_env.items():
            if value is None:
                os.environ.pop(key, None)
            else:
                os.environ[key] = value
        self._uploads.cleanup()
        get_settings.cache_clear()

    def _create_bootcamp(self, headers: dict[str, str] = PUBLISHER, **body) -> dict:
        response = self.client.post("/api/v1/bootcamps", headers=headers, json=_bootcamp_body(**body))
        self.assertEqual(response.status_code, 201, response.text)
        return response.json()["data"]


class BootcampWriteApiTests(_SettingsEnvCase):
    def test_create_geocodes_address_and_records_owner(self) -> None:
        bootcamp = self._create_bootcamp()

        self.assertEqual(bootcamp["owner_id"], "pub-1")
        self.assertEqual(bootcamp["slug"], "devworks-bootcamp")
        self.assertEqual(bootcamp["photo"], "no-photo.jpg")
        self.assertEqual(bootcamp["location"]["type"], "Point")
        self.assertEqual(bootcamp["location"]["coordinates"], [-71.1054, 42.3505])
        self.assertEqual(bootcamp["location"]["city"], "Boston")
        self.assertEqual(self.geocoder.calls, [BOSTON_ADDRESS])

    def test_publisher_may_publish_only_one_bootcamp(self) -> None:
        self._create_bootcamp()

        second = self.client.post(
            "/api/v1/bootcamps",
            headers=PUBLISHER,
            json=_bootcamp_body(name="Second Camp", address=LOWELL_ADDRESS),
        )

        self.assertEqual(second.status_code, 400)
        self.assertEqual(second.json()["code"], "BAD_REQUEST")
        self.assertEqual(second.json()["message"], "The user with ID pub-1 has already published a bootcamp")
        self.assertEqual(len(self.store.bootcamps.documents), 1)

    def test_admin_may_publish_several_bootcamps(self) -> None:
        self._create_bootcamp(headers=ADMIN)
        self._create_bootcamp(headers=ADMIN, name="Second Camp", address=LOWELL_ADDRESS)

        self.assertEqual(len(self.store.bootcamps.documents), 2)

    def test_plain_user_cannot_create(self) -> None:
        response = self.client.post("/api/v1/bootcamps", headers=PLAIN_USER, json=_bootcamp_body())

        self.assertEqual(response.status_code, 403)
        self.assertEqual(self.store.bootcamps.write_count, 0)

    def test_invalid_body_returns_validation_error(self) -> None:
        response = self.client.post("/api/v1/bootcamps", headers=PUBLISHER, json=_bootcamp_body(careers=["Astrology"]))

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["code"], "VALIDATION_ERROR")
        self.assertTrue(response.json()["details"]["errors"])

    def test_non_owner_update_is_forbidden_and_names_the_bootcamp(self) -> None:
        bootcamp = self._create_bootcamp()

        response = self.client.put(f"/api/v1/bootcamps/{bootcamp['id']}", headers=OTHER_PUBLISHER, json={"housing": False})

        self.assertEqual(response.status_code, 403)
        self.assertEqual(response.json()["code"], "FORBIDDEN")
        self.assertIn(bootcamp["id"], response.json()["message"])
        self.assertEqual(response.json()["details"], {"resource_id": bootcamp["id"], "action": "update"})
        self.assertTrue(self.store.bootcamps.get(bootcamp["id"])["housing"])

    def test_admin_update_is_allowed_regardless_of_ownership(self) -> None:
        bootcamp = self._create_bootcamp()

        response = self.client.put(
            f"/api/v1/bootcamps/{bootcamp['id']}",
            headers=ADMIN,
            json={"name": "Devworks Reloaded"},
        )

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["data"]["name"], "Devworks Reloaded")
        self.assertEqual(response.json()["data"]["slug"], "devworks-reloaded")
        self.assertEqual(response.json()["data"]["owner_id"], "pub-1")

    def test_address_change_re_geocodes(self) -> None:
        bootcamp = self._create_bootcamp()

        response = self.client.put(f"/api/v1/bootcamps/{bootcamp['id']}", headers=PUBLISHER, json={"address": LOWELL_ADDRESS})

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["data"]["location"]["city"], "Lowell")
        self.assertEqual(self.geocoder.calls, [BOSTON_ADDRESS, LOWELL_ADDRESS])

    def test_update_missing_bootcamp_returns_404(self) -> None:
        response = self.client.put("/api/v1/bootcamps/missing", headers=ADMIN, json={"housing": False})

        self.assertEqual(response.status_code, 404)
        self.assertEqual(
            response.json(),
            {"code": "RESOURCE_NOT_FOUND", "message": "Resource not found with id of missing"},
        )

    def test_delete_cascades_to_courses_and_reviews(self) -> None:
        bootcamp = self._create_bootcamp()
        course = self.client.post(
            f"/api/v1/bootcamps/{bootcamp['id']}/courses",
            headers=PUBLISHER,
            json={"title": "Front End", "description": "HTML", "weeks": "8", "tuition": 8000, "minimum_skill": "beginner"},
        )
        review = self.client.post(
            f"/api/v1/bootcamps/{bootcamp['id']}/reviews",
            headers=PLAIN_USER,
            json={"title": "Great", "text": "Learned a lot", "rating": 9},
        )
        self.assertEqual(course.status_code, 201)
        self.assertEqual(review.status_code, 201)

        forbidden = self.client.delete(f"/api/v1/bootcamps/{bootcamp['id']}", headers=OTHER_PUBLISHER)
        deleted = self.client.delete(f"/api/v1/bootcamps/{bootcamp['id']}", headers=PUBLISHER)

        self.assertEqual(forbidden.status_code, 403)
        self.assertEqual(deleted.status_code, 200)
        self.assertEqual(deleted.json(), {"success": True, "data": {}})
        self.assertEqual(self.store.bootcamps.documents, {})
        self.assertEqual(self.store.courses.documents, {})
        self.assertEqual(self.store.reviews.documents, {})

    def test_storage_failure_maps_to_upstream_failure(self) -> None:
        bootcamp = self._create_bootcamp()
        self.store.bootcamps.read_failure_message = "connection reset"

        response = self.client.get(f"/api/v1/bootcamps/{bootcamp['id']}")

        self.assertEqual(response.status_code, 502)
        self.assertEqual(response.json()["code"], "UPSTREAM_FAILURE")
        self.assertEqual(response.json()["details"], {"collaborator": "storage", "collection": "bootcamps"})

    def test_geocoder_failure_maps_to_upstream_failure(self) -> None:
        response = self.client.post(
            "/api/v1/bootcamps",
            headers=PUBLISHER,
            json=_bootcamp_body(address="1 Unknown Way"),
        )

        self.assertEqual(response.status_code, 502)
        self.assertEqual(response.json()["details"]["collaborator"], "geocoder")
        self.assertEqual(self.store.bootcamps.write_count, 0)


class BootcampReadApiTests(_SettingsEnvCase):
    def setUp(self) -> None:
        super().setUp()
        self.boston = self._create_bootcamp(headers=ADMIN, name="Devworks Bootcamp", housing=True)
        self.lowell = self._create_bootcamp(headers=ADMIN, name="Codemasters", address=LOWELL_ADDRESS, housing=False)
        self.client.post(
            f"/api/v1/bootcamps/{self.boston['id']}/courses",
            headers=ADMIN,
            json={"title": "Full Stack", "description": "MERN", "weeks": "12", "tuition": 10000, "minimum_skill": "intermediate"},
        )

    def test_list_returns_envelope_with_populated_courses(self) -> None:
        response = self.client.get("/api/v1/bootcamps", params={"sort": "name"})

        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertTrue(body["success"])
        self.assertEqual(body["count"], 2)
        self.assertEqual(body["total"], 2)
        self.assertEqual(body["pagination"], {})
        self.assertEqual([item["name"] for item in body["data"]], ["Codemasters", "Devworks Bootcamp"])
        self.assertEqual(body["data"][0]["courses"], [])
        self.assertEqual([course["title"] for course in body["data"][1]["courses"]], ["Full Stack"])

    def test_list_filters_selects_and_paginates(self) -> None:
        response = self.client.get(
            "/api/v1/bootcamps",
            params={"housing": "true", "select": "name,average_cost", "limit": "1"},
        )

        body = response.json()
        self.assertEqual(body["total"], 1)
        self.assertEqual(set(body["data"][0]) - {"courses"}, {"id", "name", "average_cost"})
        self.assertEqual(body["data"][0]["average_cost"], 10000)

    def test_list_pagination_links(self) -> None:
        response = self.client.get("/api/v1/bootcamps", params={"limit": "1", "page": "1", "sort": "name"})

        self.assertEqual(response.json()["pagination"], {"next": {"page": 2, "limit": 1}})

    def test_malformed_paging_falls_back_to_defaults(self) -> None:
        response = self.client.get("/api/v1/bootcamps", params={"page": "zero", "limit": "-4"})

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["count"], 2)

    def test_overlong_page_number_falls_back_to_defaults(self) -> None:
        response = self.client.get("/api/v1/bootcamps", params={"page": "1" * 5000})

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["count"], 2)

    def test_sorting_on_geocoded_location_orders_by_coordinates(self) -> None:
        response = self.client.get("/api/v1/bootcamps", params={"sort": "-location", "select": "name"})

        self.assertEqual(response.status_code, 200)
        self.assertEqual([item["name"] for item in response.json()["data"]], ["Devworks Bootcamp", "Codemasters"])

    def test_limit_cap_is_applied_when_configured(self) -> None:
        os.environ["DEVCAMPER_MAX_PAGE_LIMIT"] = "1"
        get_settings.cache_clear()

        response = self.client.get("/api/v1/bootcamps", params={"limit": "50"})

        self.assertEqual(response.json()["count"], 1)
        self.assertEqual(response.json()["pagination"], {"next": {"page": 2, "limit": 1}})

    def test_get_single_bootcamp(self) -> None:
        response = self.client.get(f"/api/v1/bootcamps/{self.boston['id']}")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["data"]["name"], "Devworks Bootcamp")
        self.assertEqual(response.json()["data"]["average_cost"], 10000)

    def test_radius_search_in_miles_and_kilometers(self) -> None:
        near = self.client.get("/api/v1/bootcamps/radius/02215/10")
        wider = self.client.get("/api/v1/bootcamps/radius/02215/30")
        wider_km = self.client.get("/api/v1/bootcamps/radius/02215/30", params={"unit": "km"})

        self.assertEqual(near.status_code, 200)
        self.assertEqual([item["id"] for item in near.json()["data"]], [self.boston["id"]])
        self.assertEqual(wider.json()["count"], 2)
        self.assertEqual(wider_km.json()["count"], 1)

    def test_radius_search_from_a_distant_postal_code(self) -> None:
        response = self.client.get("/api/v1/bootcamps/radius/10001/50")

        self.assertEqual(response.json(), {"success": True, "count": 0, "data": []})

    def test_radius_search_rejects_bad_distance_before_geocoding(self) -> None:
        calls_before = list(self.geocoder.calls)

        response = self.client.get("/api/v1/bootcamps/radius/02215/-5")

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["code"], "BAD_REQUEST")
        self.assertEqual(self.geocoder.calls, calls_before)

    def test_radius_search_unknown_postal_code_is_upstream_failure(self) -> None:
        response = self.client.get("/api/v1/bootcamps/radius/99999/10")

        self.assertEqual(response.status_code, 502)
        self.assertEqual(response.json()["code"], "UPSTREAM_FAILURE")


class ConfiguredGeocoderApiTests(unittest.TestCase):
    _env_keys = ("DEVCAMPER_AUTH_PROVIDER", "DEVCAMPER_GEOCODER_PROVIDER", "DEVCAMPER_GEOCODER_STATIC_TABLE")

    def setUp(self) -> None:
        self._old_env = {k: os.environ.get(k) for k in self._env_keys}
        self._tmp = tempfile.TemporaryDirectory()
        table = Path(self._tmp.name) / "geocoder.json"
        table.write_text(
            json.dumps({BOSTON_ADDRESS: {"latitude": 42.3505, "longitude": -71.1054, "city": "Boston"}}),
            encoding="utf-8",
        )
        os.environ["DEVCAMPER_AUTH_PROVIDER"] = "mock"
        os.environ["DEVCAMPER_GEOCODER_PROVIDER"] = "static"
        os.environ["DEVCAMPER_GEOCODER_STATIC_TABLE"] = str(table)
        get_settings.cache_clear()
        self.client = TestClient(create_app())

    def tearDown(self) -> None:
        for key, value in self._old_env.items():
            if value is None:
                os.environ.pop(key, None)
            else:
                os.environ[key] = value
        self._tmp.cleanup()
        load_static_table.cache_clear()
        get_settings.cache_clear()

    def test_create_geocodes_from_the_configured_table(self) -> None:
        response = self.client.post("/api/v1/bootcamps", headers=PUBLISHER, json=_bootcamp_body())

        self.assertEqual(response.status_code, 201, response.text)
        location = response.json()["data"]["location"]
        self.assertEqual(location["coordinates"], [-71.1054, 42.3505])
        self.assertEqual(location["city"], "Boston")

    def test_address_missing_from_the_table_is_upstream_failure(self) -> None:
        response = self.client.post(
            "/api/v1/bootcamps",
            headers=PUBLISHER,
            json=_bootcamp_body(address=LOWELL_ADDRESS),
        )

        self.assertEqual(response.status_code, 502)
        self.assertEqual(response.json()["details"]["collaborator"], "geocoder")


class BootcampPhotoApiTests(_SettingsEnvCase):
    def setUp(self) -> None:
        super().setUp()
        self.bootcamp = self._create_bootcamp()
        self.url = f"/api/v1/bootcamps/{self.bootcamp['id']}/photo"

    def test_owner_uploads_image_and_file_is_named_after_bootcamp(self) -> None:
        response = self.client.put(
            self.url,
            headers=PUBLISHER,
            files={"file": ("campus.png", b"\x89PNG" + b"\x00" * 60, "image/png")},
        )

        expected_name = f"photo_{self.bootcamp['id']}.png"
        self.assertEqual(response.status_code, 200, response.text)
        self.assertEqual(response.json(), {"success": True, "data": expected_name})
        self.assertEqual(self.store.bootcamps.get(self.bootcamp["id"])["photo"], expected_name)
        self.assertEqual((Path(self._uploads.name) / expected_name).stat().st_size, 64)

    def test_repeat_upload_overwrites_previous_file(self) -> None:
        for payload in (b"first", b"second"):
            self.client.put(self.url, headers=PUBLISHER, files={"file": ("campus.jpg", payload, "image/jpeg")})

        stored = Path(self._uploads.name) / f"photo_{self.bootcamp['id']}.jpg"
        self.assertEqual(stored.read_bytes(), b"second")

    def test_missing_file_is_rejected(self) -> None:
        response = self.client.put(self.url, headers=PUBLISHER)

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["message"], "Please upload a file")

    def test_non_image_is_rejected(self) -> None:
        response = self.client.put(self.url, headers=PUBLISHER, files={"file": ("notes.txt", b"hi", "text/plain")})

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["message"], "Please upload an image file")
        self.assertEqual(response.json()["details"], {"rejection": "NOT_AN_IMAGE"})

    def test_oversized_image_is_rejected(self) -> None:
        response = self.client.put(
            self.url,
            headers=PUBLISHER,
            files={"file": ("campus.png", b"\x00" * 65, "image/png")},
        )

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["message"], "Please upload an image size less than 64")
        self.assertEqual(list(Path(self._uploads.name).iterdir()), [])

    def test_non_owner_cannot_upload(self) -> None:
        response = self.client.put(
            self.url,
            headers=OTHER_PUBLISHER,
            files={"file": ("campus.png", b"\x89PNG", "image/png")},
        )

        self.assertEqual(response.status_code, 403)
        self.assertEqual(response.json()["details"]["action"], "upload")


if __name__ == "__main__":
    unittest.main()
