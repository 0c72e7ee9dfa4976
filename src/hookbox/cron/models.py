"""Configuration schema for the cron job plugin.

Mirrors the ``[cron]`` section of config.toml:

    [cron.basic]
    enable = true

    [[cron.adminpush]]
    enable = true
    rule = { name = "morning", cron = "0 0 8 * * *", msg = "Good morning @date@" }

Every job category is a list of ``{enable, rule}`` objects so a job can be
switched off without deleting it.
"""

from pydantic import BaseModel, Field

DEFAULT_CRON = "0 0 8 * * *"


class BasicSettings(BaseModel):
    """Plugin master switch."""

    enable: bool = False


class BaseRule(BaseModel):
    """Fields shared by every job rule."""

    name: str = ""
    cron: str = DEFAULT_CRON
    msg: str = ""

    @property
    def display_name(self) -> str:
        """Name used in logs; falls back to the message itself."""
        return self.name or self.msg


class MaskMessageRule(BaseRule):
    """Inject a message as if a user on ``form`` had sent it."""

    form: str = ""
    userid: str = ""
    groupid: str = ""
    friendid: str = ""


class AdminCommandRule(BaseRule):
    """Run ``msg`` as an admin command."""


class AdminPushRule(BaseRule):
    """Push ``msg`` to admins on the platforms listed in ``form``."""

    form: str = ""
    type: str = ""
    path: str = ""


class UserPushRule(BaseRule):
    """Push ``msg`` to a user or group on the platforms listed in ``form``."""

    form: str = ""
    userid: str = ""
    groupid: str = ""
    type: str = ""
    path: str = ""


class MaskMessageJob(BaseModel):
    enable: bool = True
    rule: MaskMessageRule = Field(default_factory=MaskMessageRule)


class AdminCommandJob(BaseModel):
    enable: bool = True
    rule: AdminCommandRule = Field(default_factory=AdminCommandRule)


class AdminPushJob(BaseModel):
    enable: bool = True
    rule: AdminPushRule = Field(default_factory=AdminPushRule)


class UserPushJob(BaseModel):
    enable: bool = True
    rule: UserPushRule = Field(default_factory=UserPushRule)


class CronPlusConfig(BaseModel):
    """Root model for the ``[cron]`` section."""

    basic: BasicSettings = Field(default_factory=BasicSettings)
    maskmsg: list[MaskMessageJob] = Field(default_factory=list)
    admin: list[AdminCommandJob] = Field(default_factory=list)
    adminpush: list[AdminPushJob] = Field(default_factory=list)
    userpush: list[UserPushJob] = Field(default_factory=list)


def split_platforms(form: str) -> list[str]:
    """Split a comma-separated platform list; empty means every platform."""
    return [part.strip() for part in form.split(",") if part.strip()]
