"""Message templating for scheduled jobs."""

from datetime import datetime

DATE_PLACEHOLDER = "@date@"
TIME_PLACEHOLDER = "@time@"


def render_message(template: str, now: datetime) -> str:
    """Expand a job message template.

    Config values carry newlines as the two characters ``\\n``; those become
    real newlines. ``@date@`` and ``@time@`` become the current local date
    (YYYY-MM-DD) and time (HH:MM:SS).
    """
    return (
        template.replace("\\n", "\n")
        .replace(DATE_PLACEHOLDER, now.strftime("%Y-%m-%d"))
        .replace(TIME_PLACEHOLDER, now.strftime("%H:%M:%S"))
    )
