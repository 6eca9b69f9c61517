"""Tests for site parameters and the site catalogue."""

import logging

import numpy as np
import pytest
from pymussels import MRB_SITE_NAMES, Site, SiteCatalog, SiteConfigurationError, UnknownSiteError


def make_site(site_id: int = 3, **overrides: object) -> Site:
    values: dict[str, object] = {
        "site_id": site_id,
        "name": MRB_SITE_NAMES.get(site_id, f"site {site_id}"),
        "alpha_qs": 0.05,
        "beta_qs": 1.2,
        "alpha_qd": 0.4,
        "beta_qd": 0.35,
        "mussel_weight": 25.0,
        "model_end_date": "2012-09-30",
    }
    values.update(overrides)
    return Site(**values)  # type: ignore[arg-type]


class TestSite:
    """Tests for the Site frozen dataclass."""

    def test_creates_with_valid_parameters(self) -> None:
        site = make_site()

        assert site.site_id == 3
        assert site.name == "Chippewa"
        assert site.model_end_date == np.datetime64("2012-09-30")
        assert site.calibration_end_date is None

    def test_dates_coerced_to_datetime64(self) -> None:
        site = make_site(calibration_end_date="1989-07-01")

        assert isinstance(site.model_end_date, np.datetime64)
        assert site.calibration_end_date == np.datetime64("1989-07-01")

    def test_is_frozen(self) -> None:
        site = make_site()

        with pytest.raises(AttributeError):
            site.alpha_qs = 1.0  # type: ignore[misc]

    def test_threshold_flag(self) -> None:
        assert make_site().has_discharge_threshold is False
        assert make_site(discharge_threshold=5000.0).has_discharge_threshold is True

    @pytest.mark.parametrize(
        ("overrides", "match"),
        [
            ({"name": ""}, "name"),
            ({"mussel_weight": 0.0}, "mussel_weight"),
            ({"alpha_qd": -1.0}, "alpha_qd"),
            ({"discharge_threshold": 0.0}, "discharge_threshold"),
            ({"beta_qs": float("nan")}, "beta_qs"),
        ],
    )
    def test_rejects_malformed_parameters(self, overrides: dict[str, object], match: str) -> None:
        with pytest.raises(SiteConfigurationError, match=match) as exc_info:
            make_site(site_id=7, **overrides)

        assert exc_info.value.site_id == 7
        assert "site 7" in str(exc_info.value)

    def test_configuration_error_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            make_site(mussel_weight=-1.0)

    def test_warns_outside_typical_range(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING, logger="pymussels.sites"):
            make_site(beta_qs=8.0)

        assert "beta_qs" in caplog.text


class TestSiteCatalog:
    """Tests for SiteCatalog lookup."""

    def test_get_registered_site(self) -> None:
        site = make_site(3)
        catalog = SiteCatalog([site])

        assert catalog.get(3) is site
        assert 3 in catalog
        assert len(catalog) == 1

    def test_list_sites_sorted(self) -> None:
        catalog = SiteCatalog([make_site(12), make_site(3), make_site(6)])

        assert catalog.list_sites() == [3, 6, 12]
        assert [site.site_id for site in catalog] == [3, 6, 12]

    def test_register_replaces_existing(self) -> None:
        catalog = SiteCatalog([make_site(3)])
        replacement = make_site(3, mussel_weight=40.0)
        catalog.register(replacement)

        assert catalog.get(3).mussel_weight == 40.0
        assert len(catalog) == 1

    def test_unknown_site_raises(self) -> None:
        catalog = SiteCatalog([make_site(3)])

        with pytest.raises(UnknownSiteError, match="unknown site") as exc_info:
            catalog.get(99)

        assert exc_info.value.site_id == 99
        assert str(exc_info.value).startswith("site 99")

    def test_unknown_site_is_key_error(self) -> None:
        with pytest.raises(KeyError):
            SiteCatalog().get(1)


class TestSiteNames:
    def test_twelve_study_sites(self) -> None:
        assert len(MRB_SITE_NAMES) == 12
        assert MRB_SITE_NAMES[3] == "Chippewa"
        assert MRB_SITE_NAMES[12] == "St. Croix"
