start_message = '''
<b>👋 Добро пожаловать в MergeVerse!</b>

Открывай паки, объединяй подарки до <b>L10</b>, собирай коллекции и участвуй в розыгрышах.
'''

rarity_names = {
    'COMMON': 'Обычный',
    'RARE': 'Редкий',
    'EPIC': 'Эпический',
    'LEGENDARY': 'Легендарный',
    'MYTHIC': 'Мифический',
}

winner_message = '''
<b>🎉 Поздравляем, ты выиграл в розыгрыше!</b>

Подарок: <b>{gift_name}</b> ({rarity})

Выбери, что хочешь получить:
'''

choice_saved = {
    'GIFT': '🎁 Отлично! Мы отправим тебе подарок.',
    'COMPENSATION': '💰 Отлично! Мы начислим тебе компенсацию.',
}

pending_choices_empty = 'Нет победителей, ожидающих выдачи.'

pending_choice_line = '#{winner_id} | <code>{user_id}</code> | {gift_name} | {choice}'

catalog_reloaded = '✅ Справочники перезагружены: {gifts} подарков, steps={steps}'
