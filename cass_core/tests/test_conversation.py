import threading
from dataclasses import replace

import pytest

from cass_core.domain.conversation import InMemoryConversationStore
from cass_core.domain.exceptions import ValidationError
from cass_core.personalities.registry import (
    DEFAULT_WELCOME,
    PERSONALITY_REGISTRY,
    Personality,
    get_profile,
    resolve_personality,
)


class RecordingListener:
    def __init__(self):
        self.events = []

    def assistant_message_added(self, message, personality):
        self.events.append(("speak", message.content, personality))

    def personality_switched(self, personality):
        self.events.append(("stop", personality))


def test_store_seeded_with_welcome():
    store = InMemoryConversationStore(Personality.FRIEND)
    assert len(store.messages) == 1
    assert store.messages[0].content == "Hey buddy! What's on your mind?"
    assert not store.messages[0].is_user


def test_append_and_accessors():
    store = InMemoryConversationStore()
    user = store.append_user("hi")
    reply = store.append_assistant("hello")
    assert store.last_user_message() == user
    assert store.last_assistant_message() == reply
    assert [m.is_user for m in store.messages] == [False, True, False]


def test_empty_user_message_rejected():
    store = InMemoryConversationStore()
    with pytest.raises(ValidationError):
        store.append_user("  ")


@pytest.mark.parametrize("personality", list(Personality))
def test_switch_resets_to_single_welcome(personality):
    listener = RecordingListener()
    store = InMemoryConversationStore(listeners=[listener])
    store.append_user("hi")
    store.append_assistant("hello")
    store.switch_personality(personality)
    assert len(store.messages) == 1
    assert store.messages[0].content == get_profile(personality).welcome_message
    assert store.state.selected_personality == personality
    assert listener.events[-1] == ("stop", personality)


def test_assistant_message_notifies_and_respects_generation():
    listener = RecordingListener()
    store = InMemoryConversationStore(listeners=[listener])
    generation = store.state.generation
    store.append_assistant("first")
    assert listener.events == [("speak", "first", Personality.FRIEND)]
    store.switch_personality(Personality.MENTOR)
    assert store.append_assistant("stale", expected_generation=generation) is None
    assert [m.content for m in store.messages] == [get_profile(Personality.MENTOR).welcome_message]


def test_resolve_personality():
    assert resolve_personality("Mentor") == Personality.MENTOR
    assert resolve_personality("debator") == Personality.DEBATOR
    with pytest.raises(KeyError):
        resolve_personality("pirate")


def test_empty_welcome_falls_back_to_default(monkeypatch):
    profile = get_profile(Personality.MENTOR)
    monkeypatch.setitem(PERSONALITY_REGISTRY, Personality.MENTOR, replace(profile, welcome_message=""))
    store = InMemoryConversationStore(Personality.MENTOR)
    assert store.messages[0].content == DEFAULT_WELCOME == "Hey! What's on your mind?"
    store.switch_personality(Personality.FRIEND)
    store.switch_personality(Personality.MENTOR)
    assert [m.content for m in store.messages] == [DEFAULT_WELCOME]


def test_start_turn_records_query_with_its_generation():
    store = InMemoryConversationStore()
    message, generation = store.start_turn("hi")
    assert message.is_user and message.content == "hi"
    assert store.state.last_user_query == "hi"
    assert generation == store.state.generation

    store.switch_personality(Personality.DEBATOR)
    assert store.append_assistant("late reply", expected_generation=generation) is None
    assert [m.content for m in store.messages] == [get_profile(Personality.DEBATOR).welcome_message]


def test_switch_waits_for_start_turn_to_finish():
    store = InMemoryConversationStore()
    switcher = threading.Thread(target=store.switch_personality, args=(Personality.MENTOR,))
    with store._lock:
        switcher.start()
        switcher.join(timeout=0.1)
        assert switcher.is_alive()
        _, generation = store.start_turn("hi")
    switcher.join()
    assert store.append_assistant("reply", expected_generation=generation) is None
    assert [m.is_user for m in store.messages] == [False]
