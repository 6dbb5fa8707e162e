from cass_core.domain.models import RoutingDecision
from cass_core.routing.router import Router


def test_location_query_without_location():
    router = Router()
    assert router.classify("What's the weather near me?", False) == RoutingDecision.NEEDS_LOCATION


def test_location_query_with_location_falls_to_search():
    router = Router()
    assert router.classify("What's the weather near me?", True) == RoutingDecision.USE_SEARCH


def test_search_and_completion():
    router = Router()
    assert router.classify("Who won the game today?", False) == RoutingDecision.USE_SEARCH
    assert router.classify("Tell me a joke", False) == RoutingDecision.USE_COMPLETION


def test_case_insensitive_and_custom_keywords():
    router = Router(location_keywords=["Harbor"], search_keywords=["STOCKS"])
    assert router.classify("take me to the harbor", False) == RoutingDecision.NEEDS_LOCATION
    assert router.classify("how are my stocks", False) == RoutingDecision.USE_SEARCH
    assert router.classify("weather near me", False) == RoutingDecision.USE_COMPLETION


def test_from_settings_defaults_when_unset():
    class SettingsStub:
        location_keywords = None
        search_keywords = ["joke"]

    router = Router.from_settings(SettingsStub())
    assert "near me" in router.location_keywords
    assert router.classify("Tell me a joke", False) == RoutingDecision.USE_SEARCH
