"""End-to-end tests for the WinGet REST endpoints."""

import pytest
from fastapi.testclient import TestClient

from d4rko_rest.core.config import Settings
from d4rko_rest.core.dependencies import get_manifest_source, get_settings
from d4rko_rest.main import app
from d4rko_rest.services.upstream import ManifestSource


@pytest.fixture
def make_client(settings, transport_factory):
    def factory(**transport_kwargs):
        source = ManifestSource(settings, transport=transport_factory(**transport_kwargs))
        app.dependency_overrides[get_settings] = lambda: settings
        app.dependency_overrides[get_manifest_source] = lambda: source
        return TestClient(app)

    yield factory
    app.dependency_overrides.clear()


@pytest.fixture
def client(make_client):
    return make_client()


class TestInformation:
    def test_information(self, client):
        response = client.get("/information")

        assert response.status_code == 200
        data = response.json()["Data"]
        assert data["ServerSupportedVersions"][-1] == "1.9.0"
        assert data["Authentication"]["AuthenticationType"] == "none"

    def test_root_is_information(self, client):
        assert client.get("/").json() == client.get("/information").json()

    def test_standard_headers(self, client):
        response = client.get("/information")

        assert response.headers["content-type"].startswith("application/json")
        assert response.headers["cache-control"] == "public, max-age=120"

    @pytest.mark.parametrize("path", ["/api/information", "/v1.9/information/", "/api/v1.0/information"])
    def test_prefixed_paths(self, client, path):
        response = client.get(path)

        assert response.status_code == 200
        assert "ServerSupportedVersions" in response.json()["Data"]

    def test_head_has_no_body(self, client):
        response = client.head("/information")

        assert response.status_code == 200
        assert response.content == b""
        assert response.headers["cache-control"] == "public, max-age=120"


class TestManifestSearch:
    def test_rate_limited_empty_body(self, make_client):
        client = make_client(contents_status=403)

        response = client.post("/manifestSearch", content=b"")

        assert response.status_code == 200
        assert response.json() == {"Data": []}

    def test_unparseable_body_is_empty_query(self, client):
        response = client.post("/manifestSearch", content=b"{not json")

        assert response.status_code == 200
        record = response.json()["Data"][0]
        assert record["PackageIdentifier"] == "d4rko.mpv"
        assert record["PackageName"] == "MPV Player"
        assert record["Publisher"] == "D4RKO"
        assert record["Versions"] == [{"PackageVersion": "1.10.0"}, {"PackageVersion": "1.2.3"}]

    def test_keyword_miss_ignores_maximum_results(self, client):
        response = client.post(
            "/manifestSearch", json={"Query": {"KeyWord": "vlc"}, "MaximumResults": 5}
        )

        assert response.json() == {"Data": []}

    def test_keyword_hit(self, client):
        response = client.post("/api/v1.9/manifestSearch", json={"Query": {"KeyWord": "mpv"}})

        assert len(response.json()["Data"]) == 1

    def test_get_is_accepted(self, client):
        assert client.get("/manifestSearch").status_code == 200


class TestPackageManifests:
    def test_list_all_one_record_per_version(self, client):
        data = client.get("/packageManifests").json()["Data"]

        assert [r["Versions"][0]["PackageVersion"] for r in data] == ["1.10.0", "1.2.3"]

    def test_list_all_rate_limited(self, make_client):
        client = make_client(contents_status=403)

        assert client.get("/packageManifests").json() == {"Data": []}

    def test_by_id_case_insensitive(self, client):
        response = client.get("/packageManifests/D4RKO.MPV")

        assert response.status_code == 200
        data = response.json()["Data"]
        assert data["PackageIdentifier"] == "d4rko.mpv"
        assert [v["PackageVersion"] for v in data["Versions"]] == ["1.10.0", "1.2.3"]
        assert "Locales" not in data["Versions"][0]
        assert data["Versions"][1]["Locales"][0]["PackageLocale"] == "en-US"

    def test_by_id_version_filter(self, client):
        data = client.get("/packageManifests/d4rko.mpv", params={"Version": "1.2.3"}).json()["Data"]

        assert [v["PackageVersion"] for v in data["Versions"]] == ["1.2.3"]

    def test_by_id_unknown_version_filter(self, client):
        response = client.get("/packageManifests/d4rko.mpv", params={"Version": "0.0.1"})

        assert response.status_code == 404
        assert response.json() == {"ErrorCode": "NotFound", "Message": "Version not found"}

    def test_by_id_without_versions(self, make_client):
        client = make_client(contents_status=403)

        response = client.get("/packageManifests/d4rko.mpv")

        assert response.status_code == 404
        assert response.json()["ErrorCode"] == "NotFound"

    def test_unknown_package(self, client):
        response = client.get("/packageManifests/other.pkg")

        assert response.status_code == 404
        assert response.json() == {"ErrorCode": "NotFound", "Message": "Unknown PackageIdentifier"}


class TestPackages:
    def test_list(self, client):
        assert client.get("/packages").json() == {"Data": [{"PackageIdentifier": "d4rko.mpv"}]}

    def test_by_id_case_insensitive(self, client):
        upper = client.get("/packages/D4RKO.MPV")
        lower = client.get("/packages/d4rko.mpv")

        assert upper.status_code == lower.status_code == 200
        assert upper.json() == lower.json() == {"Data": {"PackageIdentifier": "d4rko.mpv"}}

    def test_unknown_package(self, client):
        response = client.get("/packages/other.pkg")

        assert response.status_code == 404
        assert response.json()["ErrorCode"] == "NotFound"

    def test_versions(self, client):
        data = client.get("/v1.9/packages/d4rko.mpv/versions/").json()["Data"]

        assert data == [{"PackageVersion": "1.10.0"}, {"PackageVersion": "1.2.3"}]

    def test_version_detail(self, client):
        data = client.get("/packages/d4rko.mpv/versions/1.2.3").json()["Data"]

        assert data["PackageVersion"] == "1.2.3"
        assert data["DefaultLocale"]["ShortDescription"] == "Media player"

    def test_installers(self, client):
        data = client.get("/packages/d4rko.mpv/versions/1.2.3/installers").json()["Data"]

        assert [i["InstallerIdentifier"] for i in data] == [
            "d4rko.mpv-1.2.3-1",
            "d4rko.mpv-1.2.3-2",
            "d4rko.mpv-1.2.3-3",
        ]

    def test_installers_missing_version(self, client):
        response = client.get("/packages/d4rko.mpv/versions/9.9.9/installers")

        assert response.status_code == 404
        assert response.json() == {"ErrorCode": "NotFound", "Message": "Version not found"}

    def test_locales(self, client):
        data = client.get("/packages/d4rko.mpv/versions/1.2.3/locales").json()["Data"]

        assert len(data) == 1
        assert data[0]["PackageLocale"] == "en-US"

    def test_locales_absent_is_empty_list(self, client):
        response = client.get("/packages/d4rko.mpv/versions/1.10.0/locales")

        assert response.json() == {"Data": []}


class TestErrors:
    def test_unknown_route(self, client):
        response = client.get("/nope")

        assert response.status_code == 404
        assert response.json() == {"ErrorCode": "NotFound", "Message": "Not Found"}
        assert response.headers["cache-control"] == "public, max-age=120"

    def test_wrong_method_is_not_found(self, client):
        response = client.delete("/packages")

        assert response.status_code == 404
        assert response.json()["ErrorCode"] == "NotFound"

    def test_upstream_failure_is_server_error(self, make_client):
        client = make_client(contents_status=500)

        response = client.get("/packages/d4rko.mpv/versions")

        assert response.status_code == 500
        assert response.json() == {"ErrorCode": "ServerError", "Message": "GitHub API error: 500"}

    def test_broken_manifest_is_server_error(self, make_client):
        client = make_client(manifests={"1.2.3": "Installers: [unclosed"})

        response = client.get("/packages/d4rko.mpv/versions/1.2.3/installers")

        assert response.status_code == 500
        assert response.json()["ErrorCode"] == "ServerError"

    def test_error_envelope_uses_overridden_settings(self, transport_factory):
        settings = Settings(cache_max_age=5)
        source = ManifestSource(settings, transport=transport_factory())
        app.dependency_overrides[get_settings] = lambda: settings
        app.dependency_overrides[get_manifest_source] = lambda: source
        try:
            client = TestClient(app)
            ok = client.get("/packages")
            missing = client.get("/packages/other.pkg")
            unrouted = client.get("/nope")
        finally:
            app.dependency_overrides.clear()

        assert ok.headers["cache-control"] == "public, max-age=5"
        assert missing.headers["cache-control"] == "public, max-age=5"
        assert unrouted.headers["cache-control"] == "public, max-age=5"

    def test_health(self, client):
        assert client.get("/health").json() == {"status": "ok"}
