"""
Движки бота.

Содержит:
- updates.py: цикл getUpdates (UpdateLoop) и обработка событий (EventHandler)
- broadcast.py: генерация и рассылка квизов, ежечасный планировщик
- commands.py: команды /start, /help, /activate, /deactivate, /quiz, /quiznow, /summary
- prompts.py: промпты для Gemini
- replies.py: отправка длинных ответов кусками
- integration.py: сборка всех компонентов
"""

from .integration import build_components, get_commands_list, Components

__all__ = [
    'build_components',
    'get_commands_list',
    'Components',
]
