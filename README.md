# paybot

A Telegram bot for keeping track of personal payments. Users record payments
by category, amount and date, then ask for category reports or a full listing
of payments over a period. Payments are stored in a local SQLite database.

## Installation

```
pip install .
```

## Running

```
TELEGRAM_TOKEN=token WEBHOOK_URL=https://bot.example.com/ paybot
```

Settings come from the environment:

- `TELEGRAM_TOKEN` — the bot token issued by Telegram
- `WEBHOOK_URL` — the public URL Telegram should deliver updates to
- `LOGLEVEL` — `debug`, `info`, `warn` or `error` (anything else means `info`)

The command takes one option, `--db PATH`, the SQLite database file
(default `./payment_bot.db`). The `payments` table is created on start if it
does not exist.

On start the bot registers its webhook with Telegram (`setWebhook`, at most 100
connections) and serves updates over plain HTTP on port 8080, on all
interfaces. Log lines go to the console and, as JSON, to `app.log` in the
current directory. The command exits with status 1 if the database cannot be
opened or migrated, or if talking to Telegram or serving fails; Ctrl-C stops it
with status 0.

## Chat commands

- `/start` — greeting and a list of commands
- `/add_payment` — pick a category from the buttons (Еда, Транспорт,
  Развлечения, Прочее) or type your own, then enter the amount and a date in
  `YYYY-MM-DD` form or the word `сегодня`
- `/report` — totals by category for today, for the current month, or for a
  period typed as `YYYY-MM-DD - YYYY-MM-DD`; each report ends with a `Всего`
  line
- `/export` — every payment over a period typed as `YYYY-MM-DD - YYYY-MM-DD`,
  oldest first

Dates are taken as UTC days.

## Using it as a library

`paybot.app.build_application` opens and migrates the database and returns the
wired bot together with its SQLite connection:

```python
from contextlib import closing

from paybot.app import build_application

bot, connection = build_application("payment_bot.db", "token", "https://bot.example.com/")
with closing(connection):
    bot.start()
```

`bot.wsgi_app` is an ordinary WSGI application taking webhook POSTs, so it can
be served by any WSGI server; `paybot.middleware.LoggingMiddleware` wraps a
WSGI application and logs each request's method, body, URL, status and
duration:

```python
from paybot.middleware import LoggingMiddleware

app = LoggingMiddleware(bot.wsgi_app)
```

Updates can also be fed in directly with `bot.process_update(update_dict)`.

The pieces work on their own as well, for example the period parser, which
returns two UTC midnights and raises `ReportDateError` on bad input:

```python
from paybot.parser import parse_custom_report_dates

start, end = parse_custom_report_dates("2025-05-01 - 2025-05-15")
```

Other modules: `paybot.payment_storage` (`PaymentStorage`, `open_database`),
`paybot.state_storage` (`StateStorage`), the services in
`paybot.payment_service`, `paybot.report_service` and
`paybot.export_service`, `paybot.state_machine` (`StateMachine`),
`paybot.handlers` (`PaymentHandler`), `paybot.routes` (`Router`) and
`paybot.telegram` (`TelegramBot`).

## What it does not do

- Updates arrive only through the webhook; there is no long polling.
- The built-in server speaks plain HTTP; TLS must be provided in front of it.
- Unfinished dialogues (a payment being entered, a period being asked for) are
  kept in memory and are lost when the bot restarts.

## Tests

```
pip install .[test]
pytest
```