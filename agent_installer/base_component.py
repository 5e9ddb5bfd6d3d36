# agent_installer/base_component.py
# -*- coding: utf-8 -*-
"""
Lifecycle contract for something the installer puts on a host.

A component is installed, configured, and can be taken back off again.
Operations raise on failure; their boolean results only say whether the
host changed.
"""

import logging
from abc import ABC, abstractmethod
from typing import Optional

from agent_installer.config_models import AppSettings


class BaseComponent(ABC):
    description: str = ""

    def __init__(
        self,
        app_settings: AppSettings,
        logger: Optional[logging.Logger] = None,
    ):
        self.app_settings = app_settings
        self.logger = logger or logging.getLogger(
            f"{__name__}.{type(self).__name__}"
        )

    @abstractmethod
    def is_installed(self) -> bool: ...

    @abstractmethod
    def is_configured(self) -> bool: ...

    @abstractmethod
    def install(self) -> bool:
        """Make sure the component is present; True when it is afterwards."""

    @abstractmethod
    def configure(self) -> bool:
        """Write and apply the component configuration."""

    @abstractmethod
    def uninstall(self) -> bool:
        """Remove the component; False when there was nothing to remove."""

    @abstractmethod
    def unconfigure(self) -> bool:
        """Remove the configuration; False when there was none."""

    def get_description(self) -> str:
        return self.description or type(self).__name__
