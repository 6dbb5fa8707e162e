from cass_core.domain.conversation import InMemoryConversationStore
from cass_core.personalities.registry import Personality, get_profile
from cass_core.prompts import build_prompt, summarize_history
from cass_core.domain.models import Message


def _store_with_turns(turns: int) -> InMemoryConversationStore:
    store = InMemoryConversationStore(Personality.MENTOR)
    for i in range(turns):
        store.append_user(f"question {i}")
        store.append_assistant(f"answer {i}")
    return store


def test_prompt_header_and_cue():
    store = InMemoryConversationStore(Personality.DEBATOR)
    store.append_user("Cats are better than dogs")
    prompt = build_prompt(store.state)
    profile = get_profile(Personality.DEBATOR)
    assert prompt.startswith(profile.answer_style + "\n" + profile.system_prompt + "\n\n")
    assert prompt.endswith("User: Cats are better than dogs\nCASS:")
    assert "Previous conversation context" not in prompt


def test_prompt_includes_context_except_last_two():
    store = _store_with_turns(1)
    store.append_user("follow up")
    # welcome, question 0, answer 0, follow up
    prompt = build_prompt(store.state)
    assert "Previous conversation context:\nCASS: How can I help you today?" in prompt
    assert "User: question 0\n\nUser: follow up\nCASS:" in prompt
    assert "CASS: answer 0" not in prompt


def test_prompt_bounded_regardless_of_length():
    store = _store_with_turns(40)
    store.append_user("latest question")
    prompt = build_prompt(store.state)
    rendered = [line for line in prompt.splitlines() if line.startswith(("User: ", "CASS: "))]
    assert len(rendered) <= 4
    assert prompt.endswith("CASS:")
    assert "Earlier conversation summary: User has discussed: question 0, question 1, question 2 and other topics." in prompt
    assert "CASS has provided responses about: How can I help you today?" in prompt


def test_no_summary_below_threshold():
    store = _store_with_turns(6)  # 13 messages
    store.append_user("x")  # 14 messages == 4 + 10
    assert "Earlier conversation summary" not in build_prompt(store.state)
    store.append_assistant("y")
    store.append_user("z")
    assert "Earlier conversation summary" in build_prompt(store.state)


def test_summary_uses_distinct_contents():
    messages = [
        Message(content="hi", is_user=True),
        Message(content="hello", is_user=False),
        Message(content="hi", is_user=True),
        Message(content="hello", is_user=False),
        Message(content="weather", is_user=True),
    ]
    summary = summarize_history(messages)
    assert summary == "User has discussed: hi, weather. CASS has provided responses about: hello."


def test_prompt_is_deterministic():
    store = _store_with_turns(9)
    assert build_prompt(store.state) == build_prompt(store.state)
