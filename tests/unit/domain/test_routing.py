"""Unit tests for path parsing and building."""

import pytest

from daoshell.domain.routing import (
    get_app_path,
    get_locator_path,
    get_preferences_search,
    has_ens_suffix,
    parse_path,
    parse_preferences,
    strip_ens_suffix,
)
from daoshell.domain.symbols import AppMode
from daoshell.models.locator import Preferences


class TestParsePath:
    """Tests for parse_path."""

    def test_root_is_start_mode(self):
        locator = parse_path("/")
        assert locator.mode == AppMode.START
        assert locator.dao is None
        assert locator.action is None

    def test_empty_pathname_is_root(self):
        locator = parse_path("")
        assert locator.mode == AppMode.START
        assert locator.path == "/"

    def test_open_action(self):
        locator = parse_path("/open")
        assert locator.mode == AppMode.START
        assert locator.action == "open"

    def test_create_is_setup_mode(self):
        locator = parse_path("/create")
        assert locator.mode == AppMode.SETUP
        assert locator.action == "create"

    def test_dao_defaults_to_home_instance(self):
        locator = parse_path("/acme")
        assert locator.mode == AppMode.ORG
        assert locator.dao == "acme"
        assert locator.instance_id == "home"
        assert locator.instance_path == "/"

    def test_instance_and_nested_path(self):
        locator = parse_path("/acme/0xBBB/votes/12")
        assert locator.dao == "acme"
        assert locator.instance_id == "0xBBB"
        assert locator.instance_path == "/votes/12"

    def test_path_includes_search(self):
        locator = parse_path("/acme", "?preferences=/network")
        assert locator.path == "/acme?preferences=/network"
        assert locator.preferences == Preferences(screen="network")


class TestPreferences:
    """Tests for preferences query handling."""

    def test_search_without_data(self):
        assert get_preferences_search("network") == "?preferences=/network"

    def test_search_with_data(self):
        assert get_preferences_search("custom-labels", "0xabc") == "?preferences=/custom-labels/0xabc"

    def test_parse_with_data(self):
        prefs = parse_preferences("?preferences=/custom-labels/0xabc")
        assert prefs == Preferences(screen="custom-labels", data="0xabc")

    @pytest.mark.parametrize("search", ["", "?other=1", "?preferences=/"])
    def test_parse_without_screen(self, search):
        assert parse_preferences(search) is None


class TestEnsSuffix:
    """Tests for name-service suffix helpers."""

    def test_strip(self):
        assert strip_ens_suffix("acme.aragonid.eth") == "acme"
        assert strip_ens_suffix("acme") == "acme"
        assert strip_ens_suffix("acme.eth") == "acme.eth"

    def test_has_suffix(self):
        assert has_ens_suffix("acme.aragonid.eth")
        assert not has_ens_suffix("acme")
        assert not has_ens_suffix(None)
        assert not has_ens_suffix("fooaragonid.eth")
        assert strip_ens_suffix("fooaragonid.eth") == "fooaragonid.eth"


class TestGetAppPath:
    """Tests for path building."""

    def test_home_instance_is_omitted(self):
        assert get_app_path(dao="acme", instance_id="home", instance_path="/") == "/acme"

    def test_instance_with_path(self):
        path = get_app_path(dao="acme", instance_id="0xBBB", instance_path="/settings")
        assert path == "/acme/0xBBB/settings"

    def test_instance_path_without_leading_slash(self):
        assert get_app_path(dao="acme", instance_id="0xBBB", instance_path="settings") == "/acme/0xBBB/settings"

    def test_start_and_setup_modes(self):
        assert get_app_path(mode=AppMode.START) == "/"
        assert get_app_path(mode=AppMode.START, action="open") == "/open"
        assert get_app_path(mode=AppMode.SETUP) == "/create"

    def test_locator_round_trip_with_new_search(self):
        locator = parse_path("/acme/0xBBB/votes", "?preferences=/network")
        assert get_locator_path(locator) == "/acme/0xBBB/votes?preferences=/network"
        assert get_locator_path(locator, search="") == "/acme/0xBBB/votes"
