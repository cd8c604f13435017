"""Settings loader: accounts, audience tabs and industry benchmarks."""

import os
from collections.abc import Mapping
from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from .analytics.models import Benchmark
from .exceptions import ConfigLoadError, ValidationError
from .models.scope import Credentials

DEFAULT_SETTINGS_PATH = Path(__file__).parent / "config" / "settings.yaml"
DEFAULT_SERVER = "us19"


class ListTab(BaseModel):
    """Dashboard tab bound to the audience list whose name contains `match`."""

    model_config = ConfigDict(frozen=True)

    key: str
    label: str
    match: str


class AccountConfig(BaseModel):
    """One Mailchimp account; credentials are read from the environment."""

    model_config = ConfigDict(frozen=True)

    label: str
    api_key_env: str
    server_env: str
    default_server: str = DEFAULT_SERVER
    tabs: list[ListTab] = Field(default_factory=list)

    def credentials(self, environ: Mapping[str, str] | None = None) -> Credentials:
        """Build credentials from environment variables.

        Raises:
            ValidationError: If the API key variable is unset or empty
        """
        env = os.environ if environ is None else environ
        api_key = env.get(self.api_key_env, "").strip()
        if not api_key:
            raise ValidationError(
                f"No API key configured for account '{self.label}' "
                f"(set {self.api_key_env})"
            )
        server = env.get(self.server_env, "").strip() or self.default_server
        return Credentials(api_key=api_key, server=server)

    def tab(self, key: str) -> ListTab:
        for tab in self.tabs:
            if tab.key == key:
                return tab
        raise ValidationError(
            f"Unknown list '{key}' for account '{self.label}'. "
            f"Available: {[t.key for t in self.tabs]}"
        )


class BenchmarkConfig(BaseModel):
    """Benchmark entry; rates in percentage units."""

    label: str
    open_rate: float = Field(ge=0, le=100)
    click_rate: float = Field(ge=0, le=100)

    def to_benchmark(self) -> Benchmark:
        return Benchmark(
            label=self.label, open_rate=self.open_rate, click_rate=self.click_rate
        )


class InsightsSettings(BaseModel):
    """Top-level settings document."""

    accounts: dict[str, AccountConfig]
    benchmarks: list[BenchmarkConfig] = Field(default_factory=list)
    page_size: int = Field(default=100, gt=0, le=1000)
    timeout_seconds: float = Field(default=30.0, gt=0)
    list_cache_seconds: float = Field(default=3600.0, ge=0)
    max_workers: int = Field(default=4, gt=0)

    def account(self, key: str) -> AccountConfig:
        """Look up an account by key.

        Raises:
            ValidationError: If the key is not configured
        """
        try:
            return self.accounts[key]
        except KeyError:
            raise ValidationError(
                f"Unknown account '{key}'. Available: {sorted(self.accounts)}"
            ) from None

    def benchmark_table(self) -> list[Benchmark]:
        return [b.to_benchmark() for b in self.benchmarks]


def load_settings(path: Path | None = None) -> InsightsSettings:
    """Load and validate settings from YAML.

    Args:
        path: Settings file. Defaults to the bundled config/settings.yaml.

    Raises:
        ConfigLoadError: If the file cannot be read or fails validation
    """
    path = path or DEFAULT_SETTINGS_PATH
    try:
        with open(path) as f:
            raw = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise ConfigLoadError(f"Failed to load settings from {path}: {e}") from e

    try:
        return InsightsSettings.model_validate(raw or {})
    except PydanticValidationError as e:
        raise ConfigLoadError(f"Invalid settings in {path}: {e}") from e
