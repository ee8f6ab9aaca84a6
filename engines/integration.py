"""
Сборка компонентов бота.

    from engines.integration import build_components
    components = build_components(platform, generator)

    components.scheduler.start()
    await components.loop.run()

Все компоненты делят одни и те же PollRegistry и DestinationSet.
"""

from dataclasses import dataclass
from datetime import timedelta

from aiogram.types import BotCommand
from apscheduler.schedulers.asyncio import AsyncIOScheduler

from config import get_logger, HISTORY_LIMIT, POLL_TTL_HOURS
from core.history import ChatHistory
from core.registry import DestinationSet, PollRegistry
from locales import t
from .broadcast import QuizBroadcaster, build_scheduler
from .commands import CommandRouter
from .updates import EventHandler, UpdateLoop

logger = get_logger(__name__)

MENU_COMMANDS = ["start", "help", "activate", "deactivate", "quiz", "quiznow", "summary"]


@dataclass
class Components:
    registry: PollRegistry
    destinations: DestinationSet
    history: ChatHistory
    broadcaster: QuizBroadcaster
    commands: CommandRouter
    handler: EventHandler
    loop: UpdateLoop
    scheduler: AsyncIOScheduler


def build_components(platform, generator, poll_ttl_hours: int = POLL_TTL_HOURS) -> Components:
    """Создаёт хранилища, рассылку, обработчики и цикл обновлений

    Args:
        platform: TelegramPlatform
        generator: GeminiClient (или любой объект с generate(prompt, timeout))
        poll_ttl_hours: срок жизни неотвеченных опросов, 0 — бессрочно
    """
    ttl = timedelta(hours=poll_ttl_hours) if poll_ttl_hours > 0 else None
    registry = PollRegistry(ttl=ttl)
    destinations = DestinationSet()
    history = ChatHistory(limit=HISTORY_LIMIT)

    broadcaster = QuizBroadcaster(platform, generator, destinations, registry)
    commands = CommandRouter(platform, generator, destinations, broadcaster, history)
    handler = EventHandler(platform, generator, registry, commands, history)
    loop = UpdateLoop(platform, handler)
    scheduler = build_scheduler(broadcaster)

    logger.info(f"Components ready (poll TTL: {ttl or 'none'})")
    return Components(
        registry=registry,
        destinations=destinations,
        history=history,
        broadcaster=broadcaster,
        commands=commands,
        handler=handler,
        loop=loop,
        scheduler=scheduler,
    )


def get_commands_list() -> list:
    """Возвращает список команд для меню бота"""
    return [BotCommand(command=name, description=t(f"menu.{name}")) for name in MENU_COMMANDS]
