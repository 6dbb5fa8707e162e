from cass_core.agents.chat_session import ChatSession
from cass_core.api import service
from cass_core.personalities.registry import Personality


class FakeCompletion:
    name = "fake"

    def complete(self, prompt):
        return "Hello friend."


class FakeSearch:
    name = "fake"

    def search(self, query):
        return "Search answer."


class SilentSynth:
    def speak(self, text, voice):
        pass

    def stop(self):
        pass


def test_service_round_trip(monkeypatch):
    session = ChatSession(
        completion_client=FakeCompletion(),
        search_client=FakeSearch(),
        synthesizer=SilentSynth(),
        personality=Personality.FRIEND,
    )
    monkeypatch.setattr(service, "_session", session)
    out = service.send("Tell me a joke")
    assert out["assistant_message"]["content"] == "Hello friend."
    assert out["is_processing"] is False
    assert [m["is_user"] for m in service.get_messages()] == [False, True, False]

    switched = service.switch_personality("Debator")
    assert switched["personality"] == "debator"
    assert switched["welcome_message"]["content"] == "What topic would you like to debate today?"
    assert len(service.get_messages()) == 1

    service.reset_default_session()
    assert service._session is None
