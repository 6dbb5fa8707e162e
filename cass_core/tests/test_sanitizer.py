from cass_core.sanitizer import (
    EMPTY_FALLBACK,
    FORBIDDEN_FALLBACK,
    is_emoji,
    sanitize_response,
    split_sentences,
)


def test_keeps_first_two_sentences():
    assert sanitize_response("A. B. C.") == "A. B."


def test_forbidden_promise_replaces_whole_reply():
    assert sanitize_response("Sure! Let me check and get back to you.") == FORBIDDEN_FALLBACK
    assert sanitize_response("Hmm, I'll get back to you on that one.") == FORBIDDEN_FALLBACK


def test_collapses_lists_and_strips_markup():
    raw = "  Here are options:\n- **Pizza**\n- Tacos\n* Sushi  "
    assert sanitize_response(raw) == "Here are options: Pizza Tacos Sushi."


def test_strips_single_filler_prefix():
    assert sanitize_response("Of course! Paris is the capital of France.") == "Paris is the capital of France."
    assert sanitize_response("Here's what I found: It is sunny.") == "It is sunny."


def test_strips_stacked_filler_prefixes_in_one_pass():
    assert sanitize_response("Sure! Of course! Paris is the capital.") == "Paris is the capital."
    assert sanitize_response("Sure! Sure! Paris.") == "Sure! Paris."


def test_strips_emoji_but_not_ascii():
    assert sanitize_response("Great job! 🎉🚀") == "Great job!"
    assert sanitize_response("Stay cool ☀️ today, friend!") == "Stay cool  today, friend!"
    assert not is_emoji("a")
    assert not is_emoji("?")
    assert is_emoji("😀")


def test_appends_terminal_punctuation():
    assert sanitize_response("No punctuation here") == "No punctuation here."
    assert sanitize_response("First one! and a tail") == "First one! and a tail."


def test_trailing_partial_dropped_after_two_sentences():
    assert split_sentences("One. Two? three") == ["One.", "Two?"]
    assert split_sentences("One. two") == ["One.", "two"]


def test_empty_input_gets_apology():
    assert sanitize_response("") == EMPTY_FALLBACK
    assert sanitize_response("   \n  ") == EMPTY_FALLBACK
    assert sanitize_response("**") == EMPTY_FALLBACK


def test_output_is_single_line():
    assert "\n" not in sanitize_response("Line one\nline two.\r\nLine three.")


def test_idempotent_on_sanitized_text():
    samples = [
        "A. B. C.",
        "Sure! Let me check and get back to you.",
        "Here are options:\n- Pizza\n- Tacos",
        "It's 72 degrees and sunny in Austin today! Perfect for a walk.",
        "Great job! 🎉",
        "Sure! Of course! Paris is the capital.",
        "",
    ]
    for raw in samples:
        once = sanitize_response(raw)
        assert sanitize_response(once) == once
