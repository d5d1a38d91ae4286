"""User-facing texts of the dialogue."""

from ..models import CATEGORIES, Profile

COMMANDS: dict[str, str] = {
    "start": "register, or show your profile if you already have one",
    "help": "show this list",
    "info": "show your current settings",
    "edit": "change one setting: /edit city | categories | notification_time | events_interval",
    "cancel": "abort the current step",
}

ASK_CITY = "Let's get started! Which city are you in?"
ASK_CATEGORIES = (
    "Choose event categories, separated by commas. Available: "
    + ", ".join(CATEGORIES)
)
ASK_NOTIFICATION_TIME = "When should I send notifications? Format HH:MM, e.g. 19:00"
ASK_EVENTS_INTERVAL = "How many days ahead should events be included? Send a number."

ASK_EDIT = {
    "city": "Send your new city.",
    "categories": ASK_CATEGORIES,
    "notification_time": ASK_NOTIFICATION_TIME,
    "events_interval": ASK_EVENTS_INTERVAL,
}

CANCELLED = "Cancelled. Send /start to begin again."
UPDATED = "Saved."
NO_PROFILE = "You have no profile yet. Send /start to register."
ALREADY_REGISTERED = "You are already registered. Use /info or /edit."
FINISH_FIRST = "Please finish the current step or send /cancel."


def help_text() -> str:
    """List supported commands."""
    lines = ["These commands are supported:"]
    lines.extend(f"/{name} - {description}" for name, description in COMMANDS.items())
    return "\n".join(lines)


def unknown_category(token: str) -> str:
    return f"'{token}' is not a category. Available: " + ", ".join(CATEGORIES)


def unknown_parameter(parameter: str) -> str:
    return (
        f"Unknown parameter '{parameter}'. Use one of: "
        "city, categories, notification_time, events_interval"
    )


def unknown_command(command: str) -> str:
    return f"Unknown command /{command}. Send /help for the list."


def profile_summary(profile: Profile) -> str:
    """Render every profile field, one per line."""
    return (
        "Your settings\n"
        f"Your id: {profile.recipient_id}\n"
        f"City: {profile.city}\n"
        f"Categories: {', '.join(profile.categories)}\n"
        f"Notification time: {profile.notification_time.isoformat(timespec='seconds')}\n"
        f"Events interval: {profile.events_interval} days"
    )
