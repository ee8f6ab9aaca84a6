"""
Тест команд бота.
"""

import asyncio

from core.events import CommandEvent
from core.history import HistoryRecord
from engines.integration import build_components, get_commands_list
from fakes import QUIZ_JSON, FakeGenerator, FakePlatform

CHAT = 101


def command(name, args="", chat_id=CHAT, language="en", message_id=1):
    return CommandEvent(
        chat_id=chat_id,
        message_id=message_id,
        sender_id=5,
        language=language,
        text=f"/{name} {args}".strip(),
        command=name,
        args=args,
    )


def run_commands(events, generator=None, platform=None):
    platform = platform or FakePlatform()
    components = build_components(platform, generator or FakeGenerator(QUIZ_JSON), poll_ttl_hours=0)

    async def scenario():
        for event in events:
            await components.commands.handle(event)

    asyncio.run(scenario())
    return platform, components


def test_start_and_help():
    platform, _ = run_commands([command("start"), command("help")])
    greeting, help_text = platform.texts()
    assert "ChatBuddy" in greeting
    assert "@ChatBuddyBot" in help_text
    assert "/activate" in help_text


def test_activate_and_deactivate():
    platform, components = run_commands([
        command("activate"),
        command("activate"),
        command("deactivate"),
        command("deactivate"),
    ])
    assert platform.texts() == [
        "✅ Quizzes activated in this chat.",
        "✅ Quizzes are already active in this chat.",
        "❌ Quizzes deactivated in this chat.",
        "Quizzes were not active in this chat.",
    ]
    assert len(components.destinations) == 0


def test_unknown_command_fallback():
    platform, _ = run_commands([command("dance")])
    assert platform.texts() == ["I'm not sure how to respond to that."]


def test_russian_replies():
    platform, _ = run_commands([command("activate", language="ru")])
    assert platform.texts() == ["✅ Квизы включены в этом чате."]


def test_quiz_requires_word():
    generator = FakeGenerator(QUIZ_JSON)
    platform, _ = run_commands([command("quiz")], generator=generator)
    assert platform.texts() == ["Usage: /quiz <word>"]
    assert generator.calls == []


def test_quiz_sends_single_poll_to_requesting_chat():
    platform, components = run_commands([command("quiz", "serendipity")])
    assert platform.polls == [(CHAT, "X", ("1", "2", "3", "4"))]
    assert platform.messages == []
    assert len(components.registry) == 1


def test_quiz_reports_each_problem():
    generator = FakeGenerator('{"question":"","choices":["a","b"],"answer_index":2}')
    platform, components = run_commands([command("quiz", "word")], generator=generator)

    (text,) = platform.texts()
    assert "question is missing" in text
    assert "exactly 4 choices" in text
    assert "between 0 and 3" not in text
    assert platform.polls == []
    assert len(components.registry) == 0


def test_quiz_generation_failure_apologises():
    platform, _ = run_commands([command("quiz", "word")], generator=FakeGenerator())
    assert platform.texts() == ["I can't process that right now, try again later!"]


def test_quiznow_reports_counts():
    platform = FakePlatform()
    platform.failing_chats.add(303)
    platform, _ = run_commands([
        command("activate", chat_id=CHAT),
        command("activate", chat_id=202),
        command("activate", chat_id=303),
        command("quiznow"),
    ], platform=platform)

    assert platform.texts(CHAT)[-1] == "Quiz sent to 2 chat(s), 1 failed."
    assert [chat for chat, _, _ in platform.polls] == [CHAT, 202]


def test_quiznow_without_active_chats():
    generator = FakeGenerator(QUIZ_JSON)
    platform, _ = run_commands([command("quiznow")], generator=generator)
    assert platform.texts() == ["No chats have quizzes activated. Use /activate first."]
    assert generator.calls == []


def test_summary_uses_history():
    generator = FakeGenerator("- Ann said hello")
    platform = FakePlatform()
    components = build_components(platform, generator, poll_ttl_hours=0)
    components.history.append(HistoryRecord(chat_id=CHAT, sender="Ann", text="hello everyone"))

    asyncio.run(components.commands.handle(command("summary", message_id=12)))

    prompt, timeout = generator.calls[0]
    assert "Ann: hello everyone" in prompt
    assert timeout == 90
    assert platform.messages == [(CHAT, "- Ann said hello", 12)]


def test_summary_empty_history():
    generator = FakeGenerator("unused")
    platform, _ = run_commands([command("summary")], generator=generator)
    assert platform.texts() == ["There is nothing to summarise yet."]
    assert generator.calls == []


def test_menu_commands():
    commands = get_commands_list()
    assert [c.command for c in commands] == ["start", "help", "activate", "deactivate", "quiz", "quiznow", "summary"]
    assert all(c.description and not c.description.startswith("menu.") for c in commands)


def test_quiz_send_failure_is_reported():
    platform = FakePlatform()
    platform.failing_chats.add(CHAT)
    platform, components = run_commands([command("quiz", "serendipity")], platform=platform)

    assert platform.texts() == ["I couldn't send the quiz to this chat, try again later!"]
    assert len(components.registry) == 0


def test_quiz_with_blank_choice_lists_reason():
    generator = FakeGenerator('{"question":"Q","choices":["a","","c","d"],"answer_index":0}')
    platform, _ = run_commands([command("quiz", "word")], generator=generator)

    (text,) = platform.texts()
    assert "every choice must be a non-empty text" in text
