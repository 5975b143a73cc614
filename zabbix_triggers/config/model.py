# Authors:
# rafael@postgresql.org.es / http://www.postgresql.org.es/
#
# Copyright (c) 2014-2016 USIT-University of Oslo
#
# This file is part of Zabbix-triggers
# https://github.com/unioslo/zabbix-triggers
#
# Zabbix-triggers is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# Zabbix-triggers is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with Zabbix-triggers.  If not, see <http://www.gnu.org/licenses/>.
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any
from typing import Optional

from pydantic import AliasChoices
from pydantic import BaseModel as PydanticBaseModel
from pydantic import ConfigDict
from pydantic import Field
from pydantic import SecretStr
from pydantic import ValidationError
from pydantic import ValidationInfo
from pydantic import field_validator
from pydantic import model_validator
from typing_extensions import Self

from zabbix_triggers.config.constants import LOG_FILE
from zabbix_triggers.config.constants import OutputFormat
from zabbix_triggers.config.utils import find_config
from zabbix_triggers.config.utils import load_config_toml
from zabbix_triggers.exceptions import ConfigError
from zabbix_triggers.logs import LogLevelStr

logger = logging.getLogger("zabbix_triggers.config")


class BaseModel(PydanticBaseModel):
    model_config = ConfigDict(validate_assignment=True, extra="ignore")


class APIConfig(BaseModel):
    """Configuration for the Zabbix API."""

    url: str = Field(
        default="",
        validation_alias=AliasChoices("url", "zabbix_api_url"),
        description="URL of the Zabbix API host. Should not include `/api_jsonrpc.php`.",
        examples=["https://zabbix.example.com"],
    )
    username: str = Field(
        default="Admin",
        description="Username for the Zabbix API.",
        examples=["Admin"],
    )
    password: SecretStr = Field(
        default=SecretStr(""),
        description="Password for user.",
        examples=["zabbix"],
    )
    auth_token: SecretStr = Field(
        default=SecretStr(""),
        description="API auth token. Takes precedence over username and password.",
        examples=["API_TOKEN_123"],
    )
    verify_ssl: bool = Field(
        default=True,
        validation_alias=AliasChoices("verify_ssl", "cert_verify"),
        description="Verify SSL certificate of the Zabbix API host.",
    )
    timeout: Optional[int] = Field(
        default=0,
        description="API request timeout in seconds.",
    )

    @model_validator(mode="after")
    def _validate_model(self) -> Self:
        # Convert 0 timeout to None
        if self.timeout == 0:
            self.timeout = None
        return self


class TriggersConfig(BaseModel):
    """Defaults for the triggers command."""

    sort: str = Field(
        default="lastchange,priority",
        description="Comma-separated list of fields to sort triggers by.",
    )
    order: str = Field(
        default="DESC",
        description="Sort order (ASC or DESC).",
    )
    limit: str = Field(
        default="1000",
        description="Maximum number of triggers to fetch.",
    )
    acknowledge_message: str = Field(
        default="Acknowledged via zabbix-triggers",
        description="Message added to acknowledged events.",
    )
    output_format: OutputFormat = Field(
        default=OutputFormat.TABLE,
        validation_alias=AliasChoices("output_format", "format"),
        description="Default output format.",
    )

    @field_validator("output_format", "order", mode="before")
    @classmethod
    def _ignore_case(cls, v: Any, info: ValidationInfo) -> Any:
        """Ignore case when validating output format and sort order."""
        if isinstance(v, str):
            return v.upper() if info.field_name == "order" else v.lower()
        return v


class LoggingConfig(BaseModel):
    """Configuration for application logs."""

    enabled: bool = Field(
        default=True,
        validation_alias=AliasChoices("enabled", "logging", "enable"),
        description="Enable logging.",
    )
    log_level: LogLevelStr = Field(
        default="INFO",
        description="Log level.",
    )
    log_file: Optional[Path] = Field(
        default=LOG_FILE,
        description=(
            "File for storing logs. "
            "Can be set to an empty string to log to stderr (**warning:** NOISY)."
        ),
    )

    @field_validator("log_file", mode="before")
    @classmethod
    def _empty_string_is_none(cls, v: Any) -> Any:
        """Passing in an empty string to `log_file` sets it to `None`,
        while omitting the option altogether sets it to the default.
        """
        if v == "":
            return None
        return v

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_log_level(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.upper()
        return v


class Config(BaseModel):
    """Configuration for the application."""

    api: APIConfig = Field(default_factory=APIConfig)
    triggers: TriggersConfig = Field(default_factory=TriggersConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    config_path: Optional[Path] = Field(default=None, exclude=True)

    @classmethod
    def from_file(cls, filename: Optional[Path] = None) -> Config:
        """Load configuration from a file.

        Attempts to find a config file to load if none is specified.
        Falls back on the default configuration if no file can be found.
        """
        if filename and not filename.exists():
            raise ConfigError(f"Configuration file {filename} does not exist.")
        fp = find_config(filename)
        if not fp:
            logger.debug("No configuration file found. Using defaults.")
            return cls()
        return cls.from_toml_file(fp)

    @classmethod
    def from_toml_file(cls, filename: Path) -> Config:
        """Load configuration from a TOML file."""
        conf = load_config_toml(filename)
        try:
            return cls(**conf, config_path=filename)
        except ValidationError as e:
            raise ConfigError(f"Invalid configuration file {filename}: {e}") from e
