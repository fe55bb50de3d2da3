import config

from mergeverse.templates import texts


def main_user():
    keyboard = {
        'inline_keyboard': [
            [
                {'text': '🎮 Открыть MergeVerse', 'web_app': {'url': config.WEBAPP_URL}}
            ],
        ]
    }
    return keyboard


def winner_choice_kb(winner_id: int):
    keyboard = {
        'inline_keyboard': [
            [
                {'text': '🎁 Подарок', 'callback_data': f'winner:{winner_id}:GIFT'},
                {'text': '💰 Компенсация', 'callback_data': f'winner:{winner_id}:COMPENSATION'},
            ],
        ]
    }
    return keyboard


def winner_done_kb(winner_id: int):
    keyboard = {
        'inline_keyboard': [
            [
                {'text': '✅ Выдано', 'callback_data': f'winner_done:{winner_id}'}
            ],
        ]
    }
    return keyboard


def rarity_title(rarity) -> str:
    value = getattr(rarity, 'value', rarity)
    return texts.rarity_names.get(value, value)
