# =============================================================================
# tests/test_versioning.py - URL-segment API versioning
# =============================================================================

import pytest

from api_template.versioning import (
    DEPRECATED_VERSIONS_HEADER,
    SUPPORTED_VERSIONS_HEADER,
    ApiVersion,
    ApiVersionDescriptionProvider,
    versioned_router,
)


class TestApiVersion:

    @pytest.mark.parametrize(
        "version, group_name, text",
        [
            (ApiVersion(1), "v1", "1.0"),
            (ApiVersion(1, 1), "v1.1", "1.1"),
            (ApiVersion(2, 0, "beta"), "v2-beta", "2.0-beta"),
        ],
    )
    def test_formatting(self, version, group_name, text):
        assert version.group_name == group_name
        assert str(version) == text

    def test_parse(self):
        assert ApiVersion.parse("2.1-beta") == ApiVersion(2, 1, "beta")
        assert ApiVersion.parse("v3") == ApiVersion(3)
        assert ApiVersion.parse("1.0", deprecated=True).deprecated is True

    def test_parse_rejects_garbage(self):
        with pytest.raises(ValueError):
            ApiVersion.parse("one")

    def test_ordering_puts_prerelease_first(self):
        versions = [ApiVersion(2), ApiVersion(1, 1), ApiVersion(2, 0, "beta"), ApiVersion(1)]

        assert sorted(versions) == [ApiVersion(1), ApiVersion(1, 1), ApiVersion(2, 0, "beta"), ApiVersion(2)]

    def test_equality_ignores_deprecation(self):
        assert ApiVersion(1, deprecated=True) == ApiVersion(1)
        assert len({ApiVersion(1, deprecated=True), ApiVersion(1)}) == 1


class TestApiVersionDescriptionProvider:

    def setup_method(self):
        self.provider = ApiVersionDescriptionProvider(
            [ApiVersion(2), ApiVersion(1, deprecated=True)]
        )

    def test_descriptions_are_sorted(self):
        assert [v.group_name for v in self.provider.api_version_descriptions] == ["v1", "v2"]
        assert self.provider.latest == ApiVersion(2)

    def test_supported_and_deprecated(self):
        assert self.provider.supported_versions == [ApiVersion(2)]
        assert self.provider.deprecated_versions == [ApiVersion(1)]

    @pytest.mark.parametrize(
        "path, expected",
        [
            ("/v1/samples/me", "v1"),
            ("/v2", "v2"),
            ("/v3/samples", None),
            ("/swagger/v1", None),
            ("/", None),
        ],
    )
    def test_for_path(self, path, expected):
        version = self.provider.for_path(path)
        assert (version.group_name if version else None) == expected

    def test_requires_a_version(self):
        with pytest.raises(ValueError):
            ApiVersionDescriptionProvider([])


class TestVersionedRouter:

    def test_prefix_embeds_version(self):
        router = versioned_router(ApiVersion(2, 1), "/orders")
        assert router.prefix == "/v2.1/orders"


class TestVersionReportingHeaders:

    def test_versioned_response_reports_versions(self, client):
        response = client.get("/v2/samples/public")

        assert response.headers[SUPPORTED_VERSIONS_HEADER] == "2.0"
        assert response.headers[DEPRECATED_VERSIONS_HEADER] == "1.0"

    def test_error_responses_report_versions_too(self, client):
        response = client.get("/v1/samples/me")

        assert response.status_code == 401
        assert SUPPORTED_VERSIONS_HEADER in response.headers

    def test_unversioned_response_has_no_headers(self, client):
        response = client.get("/")

        assert response.status_code == 200
        assert SUPPORTED_VERSIONS_HEADER not in response.headers

    def test_unknown_version_is_not_routed(self, client):
        assert client.get("/v9/samples/public").status_code == 404
