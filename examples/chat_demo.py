"""Minimal console demonstration of a CASS chat session."""

from cass_core import create_session
from cass_core.personalities.registry import available_personalities

if __name__ == "__main__":
    session = create_session()
    print("CASS:", session.messages[-1].content)
    print("Commands: /friend /mentor /debator /location /quit")
    while True:
        text = input("You: ").strip()
        if not text:
            continue
        if text == "/quit":
            break
        if text == "/location":
            session.provide_location()
            print("[location provided]")
            continue
        if text.startswith("/") and text[1:] in available_personalities():
            session.switch_personality(text[1:])
            print("CASS:", session.messages[0].content)
            continue
        reply = session.send_message(text)
        if reply:
            print("CASS:", reply.content)
