"""Options of a local end-to-end run."""

from enum import Enum

from pydantic import Field

from rnbox.models.base import RnboxBaseModel


class Target(str, Enum):
    RNTESTER = "RNTester"
    RNTEST_PROJECT = "RNTestProject"


class Platform(str, Enum):
    IOS = "iOS"
    ANDROID = "Android"


class E2EOptions(RnboxBaseModel):
    """What to test and how."""

    target: Target = Target.RNTESTER
    platform: Platform = Platform.IOS
    hermes: bool = Field(default=True, description="Test the Hermes engine instead of JSC")

    @property
    def engine_name(self) -> str:
        return "Hermes" if self.hermes else "JSC"
